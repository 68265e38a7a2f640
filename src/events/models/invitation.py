from django.db import models
from django.utils import timezone

from common.models import TimeStampedModel


class InvitationLog(TimeStampedModel):
    """One row per outbound message attempt.

    Only provider delivery webhooks mutate a row after insert, and only its ``status``.
    """

    class MessageType(models.TextChoices):
        INVITATION = "invitation", "Invitation"
        THANK_YOU = "thank_you", "Thank You"

    class Channel(models.TextChoices):
        EMAIL = "email", "Email"
        SMS = "sms", "SMS"

    class Status(models.TextChoices):
        SENT = "sent", "Sent"
        DELIVERED = "delivered", "Delivered"
        FAILED = "failed", "Failed"
        BOUNCED = "bounced", "Bounced"

    event = models.ForeignKey("events.Event", on_delete=models.CASCADE, related_name="invitation_logs")
    contact = models.ForeignKey(
        "events.Contact", on_delete=models.SET_NULL, null=True, blank=True, related_name="invitation_logs"
    )
    message_type = models.CharField(max_length=20, choices=MessageType.choices, db_index=True)
    channel = models.CharField(max_length=10, choices=Channel.choices)
    recipient = models.CharField(max_length=255)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.SENT, db_index=True)
    provider_message_id = models.CharField(max_length=255, blank=True, default="", db_index=True)
    error = models.TextField(blank=True, default="")
    sent_at = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ["-sent_at"]

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.message_type} via {self.channel} to {self.recipient} ({self.status})"
