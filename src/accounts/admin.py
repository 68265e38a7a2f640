from django.contrib import admin
from django.contrib.auth.admin import UserAdmin
from unfold.admin import ModelAdmin, StackedInline

from accounts.models import GuestlistUser, TeamMember


class TeamMemberInline(StackedInline):  # type: ignore[misc]
    model = TeamMember
    extra = 0
    can_delete = True
    fields = ["role", "name", "email"]


@admin.register(GuestlistUser)
class GuestlistUserAdmin(UserAdmin, ModelAdmin):  # type: ignore[misc]
    inlines = [TeamMemberInline]
    list_display = ["username", "email", "first_name", "last_name", "team_role", "is_staff"]
    search_fields = ["username", "email", "first_name", "last_name"]

    @admin.display(description="Team role")
    def team_role(self, obj: GuestlistUser) -> str:
        return obj.team_role or "-"


@admin.register(TeamMember)
class TeamMemberAdmin(ModelAdmin):  # type: ignore[misc]
    list_display = ["name", "email", "role", "created_at"]
    list_filter = ["role"]
    search_fields = ["name", "email", "user__username"]
    autocomplete_fields = ["user"]
