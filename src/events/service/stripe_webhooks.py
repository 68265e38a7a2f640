import stripe
import structlog
from django.db import transaction
from django.utils import timezone

from events.exceptions import InventoryConflictError
from events.models import Ticket

from . import inventory

logger = structlog.get_logger(__name__)


class StripeEventHandler:
    """Handles the business logic for different types of Stripe webhook events.

    Every handler is idempotent: Stripe re-delivers events until it gets a 2xx, and may deliver
    them concurrently or out of order.
    """

    def __init__(self, event: stripe.Event):
        self.event = event

    def handle(self) -> None:
        """Routes the event to the appropriate handler based on its type."""
        event_type = self.event.type
        handler_method = getattr(self, f"handle_{event_type.replace('.', '_')}", self.handle_unknown_event)
        handler_method(self.event)

    def handle_unknown_event(self, event: stripe.Event) -> None:
        """Log unhandled event types."""
        logger.info("stripe_webhook_unhandled_event", event_type=event.type, event_id=event.id)

    def handle_checkout_session_completed(self, event: stripe.Event) -> None:
        """Confirm the ticket behind a paid checkout session and count its seats.

        Sessions paid with a delayed method complete as ``unpaid``. Their ticket stays pending
        until ``checkout.session.async_payment_succeeded`` or ``async_payment_failed`` arrives.
        """
        session = event.data.object
        if session["payment_status"] not in {"paid", "no_payment_required"}:
            logger.warning(
                "stripe_session_unresolved_payment",
                session_id=session["id"],
                payment_status=session["payment_status"],
            )
            return
        self._confirm_session(session)

    def handle_checkout_session_async_payment_succeeded(self, event: stripe.Event) -> None:
        """Confirm the ticket once a delayed payment settles."""
        self._confirm_session(event.data.object)

    def _confirm_session(self, session: stripe.checkout.Session) -> None:
        """Confirm the session's ticket, then count its seats.

        Confirmation and the inventory increment are checked independently, so a redelivery
        after a failed increment still counts the seats exactly once.
        """
        ticket_id = (session.get("metadata") or {}).get("ticket_id")

        if not ticket_id:
            logger.warning("stripe_session_missing_ticket_id", session_id=session["id"])
            return

        with transaction.atomic():
            ticket = Ticket.objects.select_for_update().filter(pk=ticket_id).first()
            if ticket is None:
                logger.warning("stripe_session_unknown_ticket", session_id=session["id"], ticket_id=ticket_id)
                return

            already_confirmed = ticket.status in (Ticket.Status.CONFIRMED, Ticket.Status.CHECKED_IN)
            if (already_confirmed and ticket.inventory_counted) or ticket.status == Ticket.Status.REFUNDED:
                logger.warning(
                    "stripe_webhook_duplicate_payment_success",
                    session_id=session["id"],
                    ticket_id=ticket_id,
                )
                return

            if not already_confirmed:
                ticket.status = Ticket.Status.CONFIRMED
                ticket.amount_paid_cents = session.get("amount_total") or 0
                ticket.stripe_payment_intent_id = session.get("payment_intent") or ""
                ticket.stripe_session_id = ticket.stripe_session_id or session["id"]
                ticket.purchased_at = timezone.now()
                ticket.save(
                    update_fields=[
                        "status",
                        "amount_paid_cents",
                        "stripe_payment_intent_id",
                        "stripe_session_id",
                        "purchased_at",
                        "updated_at",
                    ]
                )
                logger.info(
                    "stripe_payment_success",
                    session_id=session["id"],
                    ticket_id=ticket_id,
                    amount_paid_cents=ticket.amount_paid_cents,
                )

        self._count_inventory(ticket)

    def _count_inventory(self, ticket: Ticket) -> None:
        """Add a confirmed ticket's seats to its tier, once.

        A failure is logged for manual reconciliation but never raised: the payment already
        happened and Stripe must get its acknowledgement.
        """
        try:
            with transaction.atomic():
                locked = Ticket.objects.select_for_update().get(pk=ticket.pk)
                if locked.inventory_counted:
                    return
                inventory.adjust_quantity_sold(locked.tier_id, locked.quantity)
                locked.inventory_counted = True
                locked.save(update_fields=["inventory_counted", "updated_at"])
        except InventoryConflictError:
            logger.error(
                "stripe_inventory_increment_failed",
                ticket_id=str(ticket.pk),
                tier_id=str(ticket.tier_id),
                quantity=ticket.quantity,
                reason="capacity_exceeded",
            )

    @transaction.atomic
    def handle_charge_refunded(self, event: stripe.Event) -> None:
        """Mark the ticket paid by the refunded charge as refunded.

        The seats stay counted: the sold count never goes down.
        """
        charge_data = event.data.object
        payment_intent_id = charge_data.get("payment_intent")

        if not payment_intent_id:
            logger.warning("stripe_refund_missing_intent", charge_id=charge_data.get("id"))
            return

        ticket = Ticket.objects.select_for_update().filter(stripe_payment_intent_id=payment_intent_id).first()
        if ticket is None:
            logger.warning("stripe_refund_unknown_intent", payment_intent_id=payment_intent_id)
            return

        if ticket.status == Ticket.Status.REFUNDED:
            logger.warning("stripe_webhook_duplicate_refund", payment_intent_id=payment_intent_id)
            return

        ticket.status = Ticket.Status.REFUNDED
        ticket.save(update_fields=["status", "updated_at"])
        logger.info("stripe_refund_processed", payment_intent_id=payment_intent_id, ticket_id=str(ticket.id))

    def handle_checkout_session_expired(self, event: stripe.Event) -> None:
        """Cancel the pending ticket of an abandoned checkout. Pending tickets hold no seats."""
        self._cancel_pending(event.data.object, "stripe_checkout_expired")

    def handle_checkout_session_async_payment_failed(self, event: stripe.Event) -> None:
        """Cancel the pending ticket whose delayed payment failed."""
        self._cancel_pending(event.data.object, "stripe_async_payment_failed")

    @transaction.atomic
    def _cancel_pending(self, session: stripe.checkout.Session, log_event: str) -> None:
        ticket = (
            Ticket.objects.select_for_update()
            .filter(stripe_session_id=session["id"], status=Ticket.Status.PENDING)
            .first()
        )
        if ticket is None:
            logger.info("stripe_session_no_pending_ticket", session_id=session["id"], reason=log_event)
            return

        ticket.status = Ticket.Status.CANCELLED
        ticket.save(update_fields=["status", "updated_at"])
        logger.info(log_event, session_id=session["id"], ticket_id=str(ticket.id))
