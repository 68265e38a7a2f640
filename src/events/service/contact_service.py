"""Per-event contact management and CSV import.

Contacts are deduplicated per event on case-insensitive email and on exact phone.
"""

import typing as t
from dataclasses import dataclass, field

import structlog
from django.core.exceptions import ValidationError
from django.core.validators import validate_email
from django.db import transaction
from django.utils import timezone
from ninja.errors import HttpError

from accounts.models import GuestlistUser
from events.models import Contact, CsvImport, Event

logger = structlog.get_logger(__name__)

MAX_IMPORT_ROWS = 5000


@dataclass
class ImportResult:
    import_id: t.Any
    total_rows: int
    imported: int = 0
    skipped: int = 0
    skipped_details: list[dict[str, t.Any]] = field(default_factory=list)


def clamp_channel(channel: str, email: str, phone: str) -> str:
    """Narrow a requested channel to the identifiers the contact actually has."""
    wants_email = channel in (Contact.Channel.EMAIL, Contact.Channel.BOTH) and bool(email)
    wants_sms = channel in (Contact.Channel.SMS, Contact.Channel.BOTH) and bool(phone)
    if wants_email and wants_sms:
        return Contact.Channel.BOTH
    if wants_email:
        return Contact.Channel.EMAIL
    if wants_sms:
        return Contact.Channel.SMS
    return Contact.Channel.NONE


def _assert_unique(event: Event, email: str, phone: str, exclude: Contact | None = None) -> None:
    qs = Contact.objects.filter(event=event)
    if exclude is not None:
        qs = qs.exclude(pk=exclude.pk)
    if email and qs.with_email(email).exists():
        raise HttpError(400, "A contact with this email already exists for this event.")
    if phone and qs.with_phone(phone).exists():
        raise HttpError(400, "A contact with this phone number already exists for this event.")


def create_contact(event: Event, data: dict[str, t.Any]) -> Contact:
    email = (data.get("email") or "").strip()
    phone = (data.get("phone") or "").strip()
    if not (email or phone):
        raise HttpError(400, "At least one of email or phone is required")
    _assert_unique(event, email, phone)

    contact = Contact.objects.create(
        event=event,
        first_name=data.get("first_name", ""),
        last_name=data.get("last_name", ""),
        email=email,
        phone=phone,
        invitation_channel=clamp_channel(data.get("invitation_channel") or Contact.Channel.NONE, email, phone),
    )
    logger.info("contact_created", event_id=str(event.id), contact_id=str(contact.id))
    return contact


def update_contact(contact: Contact, data: dict[str, t.Any]) -> Contact:
    email = (data.get("email", contact.email) or "").strip()
    phone = (data.get("phone", contact.phone) or "").strip()
    if not (email or phone):
        raise HttpError(400, "At least one of email or phone is required")
    _assert_unique(contact.event, email, phone, exclude=contact)

    for key, value in data.items():
        setattr(contact, key, value if value is not None else "")
    contact.email, contact.phone = email, phone
    contact.invitation_channel = clamp_channel(contact.invitation_channel, email, phone)
    contact.save()
    logger.info("contact_updated", contact_id=str(contact.id), fields=sorted(data))
    return contact


def update_contact_channel(contact: Contact, channel: str) -> Contact:
    contact.invitation_channel = clamp_channel(channel, contact.email, contact.phone)
    contact.save(update_fields=["invitation_channel", "updated_at"])
    return contact


def delete_contact(contact: Contact) -> None:
    """Delete a contact. Its tickets survive with the link cleared."""
    contact_id = str(contact.id)
    contact.delete()
    logger.info("contact_deleted", contact_id=contact_id)


def _row_value(row: t.Mapping[str, t.Any], key: str) -> str:
    return str(row.get(key) or "").strip()


@transaction.atomic
def import_contacts(
    event: Event,
    rows: list[t.Mapping[str, t.Any]],
    *,
    filename: str,
    imported_by: GuestlistUser | None = None,
    default_channel: str = Contact.Channel.BOTH,
) -> ImportResult:
    """Import already-parsed CSV rows as contacts of ``event``.

    Rows without any identifier, with an invalid email, or matching an existing contact or an earlier
    row of the same file are skipped with a reason. Row numbers in the details are 1-based.
    """
    if not rows:
        raise HttpError(400, "CSV file is empty.")
    if len(rows) > MAX_IMPORT_ROWS:
        raise HttpError(400, "CSV file exceeds 5,000 row limit.")

    existing = Contact.objects.filter(event=event).values_list("email", "phone")
    known_emails = {email.lower() for email, _ in existing if email}
    known_phones = {phone for _, phone in existing if phone}
    batch_emails: set[str] = set()
    batch_phones: set[str] = set()

    now = timezone.now()
    to_create: list[Contact] = []
    skipped: list[dict[str, t.Any]] = []

    for row_number, row in enumerate(rows, start=1):
        email = _row_value(row, "email")
        phone = _row_value(row, "phone")

        reason = None
        if not (email or phone):
            reason = "Missing both email and phone"
        elif email and not _is_valid_email(email):
            reason = f"Invalid email: {email}"
        elif email and email.lower() in known_emails:
            reason = f"Duplicate email: {email}"
        elif phone and phone in known_phones:
            reason = f"Duplicate phone: {phone}"
        elif email and email.lower() in batch_emails:
            reason = f"Duplicate email within CSV: {email}"
        elif phone and phone in batch_phones:
            reason = f"Duplicate phone within CSV: {phone}"

        if reason:
            skipped.append({"row": row_number, "reason": reason})
            continue

        if email:
            batch_emails.add(email.lower())
        if phone:
            batch_phones.add(phone)
        channel = _row_value(row, "invitation_channel") or default_channel
        if channel not in Contact.Channel.values:
            channel = default_channel
        to_create.append(
            Contact(
                event=event,
                first_name=_row_value(row, "first_name"),
                last_name=_row_value(row, "last_name"),
                email=email,
                phone=phone,
                invitation_channel=clamp_channel(channel, email, phone),
                csv_source=filename,
                imported_at=now,
            )
        )

    Contact.objects.bulk_create(to_create)
    csv_import = CsvImport.objects.create(
        event=event,
        filename=filename,
        row_count=len(rows),
        imported_count=len(to_create),
        skipped_count=len(skipped),
        imported_by=imported_by,
    )
    logger.info(
        "contacts_imported",
        event_id=str(event.id),
        import_id=str(csv_import.id),
        row_count=len(rows),
        imported=len(to_create),
        skipped=len(skipped),
    )
    return ImportResult(
        import_id=csv_import.id,
        total_rows=len(rows),
        imported=len(to_create),
        skipped=len(skipped),
        skipped_details=skipped,
    )


def _is_valid_email(email: str) -> bool:
    try:
        validate_email(email)
    except ValidationError:
        return False
    return True
