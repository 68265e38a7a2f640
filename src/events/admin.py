import typing as t

from django.contrib import admin
from django.urls import reverse
from django.utils.html import format_html
from unfold.admin import ModelAdmin, TabularInline

from . import models


class EventLinkMixin:
    """Mixin to add a link to the parent event."""

    def event_link(self, obj: t.Any) -> str:
        url = reverse("admin:events_event_change", args=[obj.event_id])
        return format_html('<a href="{}">{}</a>', url, obj.event.title)

    event_link.short_description = "Event"  # type: ignore[attr-defined]


class TicketTierInline(TabularInline):  # type: ignore[misc]
    model = models.TicketTier
    extra = 0
    fields = ["name", "price_cents", "quantity_total", "quantity_sold", "max_per_contact", "sort_order"]
    readonly_fields = ["quantity_sold"]


@admin.register(models.Event)
class EventAdmin(ModelAdmin):  # type: ignore[misc]
    list_display = ["title", "event_type", "date_start", "status", "link_active", "capacity"]
    list_filter = ["status", "event_type", "link_active"]
    search_fields = ["title", "slug", "location_name"]
    readonly_fields = ["slug", "archived_at", "created_by"]
    date_hierarchy = "date_start"
    inlines = [TicketTierInline]


@admin.register(models.TicketTier)
class TicketTierAdmin(ModelAdmin, EventLinkMixin):  # type: ignore[misc]
    list_display = ["name", "event_link", "price_cents", "quantity_sold", "quantity_total", "max_per_contact"]
    list_filter = ["event"]
    search_fields = ["name", "event__title"]
    autocomplete_fields = ["event"]
    # The sold count moves only through reservations and webhooks.
    readonly_fields = ["quantity_sold", "stripe_product_id", "stripe_price_id"]


@admin.register(models.Ticket)
class TicketAdmin(ModelAdmin, EventLinkMixin):  # type: ignore[misc]
    list_display = ["ticket_code", "attendee_name", "event_link", "tier_name", "quantity", "status", "checked_in_at"]
    list_filter = ["status", "event"]
    search_fields = ["ticket_code", "attendee_name", "attendee_email", "stripe_payment_intent_id"]
    autocomplete_fields = ["event", "tier", "contact"]
    readonly_fields = [
        "ticket_code",
        "inventory_counted",
        "stripe_session_id",
        "stripe_payment_intent_id",
        "amount_paid_cents",
        "checked_in_at",
        "created_by",
    ]
    date_hierarchy = "created_at"

    @admin.display(description="Tier")
    def tier_name(self, obj: models.Ticket) -> str:
        return obj.tier.name


@admin.register(models.Contact)
class ContactAdmin(ModelAdmin, EventLinkMixin):  # type: ignore[misc]
    list_display = ["__str__", "email", "phone", "invitation_channel", "event_link", "invited_at"]
    list_filter = ["invitation_channel", "event"]
    search_fields = ["first_name", "last_name", "email", "phone"]
    autocomplete_fields = ["event"]


@admin.register(models.CsvImport)
class CsvImportAdmin(ModelAdmin, EventLinkMixin):  # type: ignore[misc]
    list_display = ["filename", "event_link", "row_count", "imported_count", "skipped_count", "created_at"]
    readonly_fields = ["event", "filename", "row_count", "imported_count", "skipped_count", "imported_by"]


@admin.register(models.InvitationLog)
class InvitationLogAdmin(ModelAdmin, EventLinkMixin):  # type: ignore[misc]
    list_display = ["recipient", "message_type", "channel", "status", "event_link", "sent_at"]
    list_filter = ["message_type", "channel", "status"]
    search_fields = ["recipient", "provider_message_id"]
    readonly_fields = ["provider_message_id", "error", "sent_at"]
