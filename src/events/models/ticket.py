import secrets
import typing as t

from django.conf import settings
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Q, Sum
from django.utils import timezone

from common.models import TimeStampedModel

TICKET_CODE_PREFIX = "TIX-"
TICKET_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"
TICKET_CODE_LENGTH = 8


def generate_ticket_code() -> str:
    """Return a new opaque ticket code, e.g. ``TIX-7K2MPQ9A``."""
    return TICKET_CODE_PREFIX + "".join(secrets.choice(TICKET_CODE_ALPHABET) for _ in range(TICKET_CODE_LENGTH))


class TicketTierQuerySet(models.QuerySet["TicketTier"]):
    def for_event(self, event_id: t.Any) -> t.Self:
        return self.filter(event_id=event_id).order_by("sort_order", "created_at")


class TicketTierManager(models.Manager["TicketTier"]):
    def get_queryset(self) -> TicketTierQuerySet:
        return TicketTierQuerySet(self.model, using=self._db)

    def for_event(self, event_id: t.Any) -> TicketTierQuerySet:
        return self.get_queryset().for_event(event_id)


class TicketTier(TimeStampedModel):
    """A purchasable or reservable category of ticket for an event.

    ``quantity_sold`` only ever moves through ``events.service.inventory``, which keeps it
    inside ``[0, quantity_total]`` with a conditional update. The check constraint below
    backs that up at the database level.
    """

    event = models.ForeignKey("events.Event", on_delete=models.CASCADE, related_name="ticket_tiers")
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    price_cents = models.PositiveIntegerField(default=0, help_text="0 means the tier is free (RSVP).")
    quantity_total = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    quantity_sold = models.PositiveIntegerField(default=0)
    max_per_contact = models.PositiveIntegerField(
        null=True, blank=True, validators=[MinValueValidator(1)], help_text="Null means no per-contact cap."
    )
    stripe_product_id = models.CharField(max_length=255, blank=True, default="")
    stripe_price_id = models.CharField(max_length=255, blank=True, default="")
    sort_order = models.PositiveIntegerField(default=0, db_index=True)

    objects = TicketTierManager()

    class Meta:
        ordering = ["sort_order", "created_at"]
        constraints = [
            models.CheckConstraint(
                condition=Q(quantity_sold__lte=models.F("quantity_total")),
                name="tier_quantity_sold_within_total",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.event_id} - {self.name}"

    @property
    def is_free(self) -> bool:
        return self.price_cents == 0

    @property
    def remaining(self) -> int:
        return max(self.quantity_total - self.quantity_sold, 0)


class TicketQuerySet(models.QuerySet["Ticket"]):
    def with_tier(self) -> t.Self:
        return self.select_related("tier", "event")

    def holding(self) -> t.Self:
        """Tickets that still claim their seats."""
        return self.exclude(status__in=[Ticket.Status.CANCELLED, Ticket.Status.REFUNDED])

    def attended(self) -> t.Self:
        return self.filter(status__in=[Ticket.Status.CONFIRMED, Ticket.Status.CHECKED_IN])

    def for_contact(self, *, email: str | None = None, phone: str | None = None) -> t.Self:
        """Tickets held by a contact, identified by email (case-insensitive) or else phone."""
        if email:
            return self.filter(attendee_email__iexact=email)
        if phone:
            return self.filter(attendee_phone=phone)
        return self.none()

    def total_quantity(self) -> int:
        return int(self.aggregate(total=Sum("quantity"))["total"] or 0)


class TicketManager(models.Manager["Ticket"]):
    def get_queryset(self) -> TicketQuerySet:
        return TicketQuerySet(self.model, using=self._db)

    def with_tier(self) -> TicketQuerySet:
        return self.get_queryset().with_tier()

    def holding(self) -> TicketQuerySet:
        return self.get_queryset().holding()

    def attended(self) -> TicketQuerySet:
        return self.get_queryset().attended()


class Ticket(TimeStampedModel):
    class Status(models.TextChoices):
        PENDING = "pending", "Pending"
        CONFIRMED = "confirmed", "Confirmed"
        CHECKED_IN = "checked_in", "Checked In"
        CANCELLED = "cancelled", "Cancelled"
        REFUNDED = "refunded", "Refunded"

    event = models.ForeignKey("events.Event", on_delete=models.CASCADE, related_name="tickets")
    tier = models.ForeignKey(TicketTier, on_delete=models.PROTECT, related_name="tickets")
    contact = models.ForeignKey(
        "events.Contact", on_delete=models.SET_NULL, null=True, blank=True, related_name="tickets"
    )
    attendee_name = models.CharField(max_length=500)
    attendee_email = models.EmailField(blank=True, default="", db_index=True)
    attendee_phone = models.CharField(max_length=30, blank=True, default="")
    ticket_code = models.CharField(max_length=16, unique=True, default=generate_ticket_code, editable=False)
    quantity = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING, db_index=True)
    inventory_counted = models.BooleanField(
        default=False, help_text="Whether this ticket's seats have been added to the tier's sold count."
    )
    stripe_session_id = models.CharField(max_length=255, blank=True, default="", db_index=True)
    stripe_payment_intent_id = models.CharField(max_length=255, blank=True, default="", db_index=True)
    amount_paid_cents = models.PositiveIntegerField(default=0)
    purchased_at = models.DateTimeField(default=timezone.now)
    checked_in_at = models.DateTimeField(null=True, blank=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="created_tickets",
        help_text="Team member who issued a walk-in ticket.",
    )

    objects = TicketManager()

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.ticket_code} ({self.status})"

    def clean(self) -> None:
        """Ticket and tier must point at the same event."""
        super().clean()
        if self.tier_id and self.event_id and self.tier.event_id != self.event_id:
            raise ValidationError({"tier": "Tier does not belong to this event."})
