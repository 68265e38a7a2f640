from django.http import HttpRequest
from ninja_extra import ControllerBase
from ninja_extra.permissions import BasePermission

from accounts.models import TeamMember


class IsTeamMember(BasePermission):
    """Any authenticated user with a team membership, helpers included."""

    message = "You are not a member of the team."

    def has_permission(self, request: HttpRequest, controller: ControllerBase) -> bool:
        return TeamMember.objects.filter(user_id=request.user.pk).exists()


class IsTeamAdmin(BasePermission):
    message = "Only team admins can perform this action."

    def has_permission(self, request: HttpRequest, controller: ControllerBase) -> bool:
        return TeamMember.objects.filter(user_id=request.user.pk, role=TeamMember.Role.ADMIN).exists()
