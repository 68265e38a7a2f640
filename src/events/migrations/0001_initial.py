import uuid

import django.core.validators
import django.db.models.deletion
import django.db.models.functions.text
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models

import events.models.ticket


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Event",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True, db_index=True)),
                ("title", models.CharField(max_length=255)),
                ("slug", models.SlugField(max_length=80, unique=True)),
                (
                    "event_type",
                    models.CharField(
                        choices=[
                            ("dinner", "Dinner"),
                            ("concert", "Concert"),
                            ("movie_night", "Movie Night"),
                            ("other", "Other"),
                        ],
                        db_index=True,
                        default="other",
                        max_length=20,
                    ),
                ),
                ("description", models.TextField(blank=True, default="")),
                ("date_start", models.DateTimeField(db_index=True)),
                ("date_end", models.DateTimeField()),
                ("location_name", models.CharField(blank=True, default="", max_length=255)),
                ("location_address", models.CharField(blank=True, default="", max_length=500)),
                (
                    "capacity",
                    models.PositiveIntegerField(
                        blank=True, null=True, validators=[django.core.validators.MinValueValidator(1)]
                    ),
                ),
                ("cover_image_url", models.URLField(blank=True, default="", max_length=1000)),
                ("host_bio", models.TextField(blank=True, default="")),
                (
                    "faq",
                    models.JSONField(blank=True, default=list, help_text="List of {question, answer} objects."),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[("draft", "Draft"), ("published", "Published"), ("archived", "Archived")],
                        db_index=True,
                        default="draft",
                        max_length=20,
                    ),
                ),
                (
                    "link_active",
                    models.BooleanField(default=True, help_text="Whether the public event link accepts visitors."),
                ),
                ("archived_at", models.DateTimeField(blank=True, null=True)),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="created_events",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-date_start"],
            },
        ),
        migrations.CreateModel(
            name="Contact",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True, db_index=True)),
                ("first_name", models.CharField(blank=True, default="", max_length=255)),
                ("last_name", models.CharField(blank=True, default="", max_length=255)),
                ("email", models.EmailField(blank=True, default="", max_length=254)),
                ("phone", models.CharField(blank=True, default="", max_length=30)),
                (
                    "invitation_channel",
                    models.CharField(
                        choices=[("email", "Email"), ("sms", "SMS"), ("both", "Email and SMS"), ("none", "None")],
                        default="none",
                        max_length=10,
                    ),
                ),
                ("invited_at", models.DateTimeField(blank=True, null=True)),
                ("csv_source", models.CharField(blank=True, default="", max_length=255)),
                ("imported_at", models.DateTimeField(blank=True, null=True)),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE, related_name="contacts", to="events.event"
                    ),
                ),
            ],
            options={
                "ordering": ["last_name", "first_name"],
                "constraints": [
                    models.UniqueConstraint(
                        django.db.models.functions.text.Lower("email"),
                        models.F("event"),
                        condition=models.Q(("email", ""), _negated=True),
                        name="unique_contact_email_per_event",
                    ),
                    models.UniqueConstraint(
                        condition=models.Q(("phone", ""), _negated=True),
                        fields=("event", "phone"),
                        name="unique_contact_phone_per_event",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="CsvImport",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True, db_index=True)),
                ("filename", models.CharField(max_length=255)),
                ("row_count", models.PositiveIntegerField(default=0)),
                ("imported_count", models.PositiveIntegerField(default=0)),
                ("skipped_count", models.PositiveIntegerField(default=0)),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE, related_name="csv_imports", to="events.event"
                    ),
                ),
                (
                    "imported_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="csv_imports",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="InvitationLog",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True, db_index=True)),
                (
                    "message_type",
                    models.CharField(
                        choices=[("invitation", "Invitation"), ("thank_you", "Thank You")],
                        db_index=True,
                        max_length=20,
                    ),
                ),
                ("channel", models.CharField(choices=[("email", "Email"), ("sms", "SMS")], max_length=10)),
                ("recipient", models.CharField(max_length=255)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("sent", "Sent"),
                            ("delivered", "Delivered"),
                            ("failed", "Failed"),
                            ("bounced", "Bounced"),
                        ],
                        db_index=True,
                        default="sent",
                        max_length=20,
                    ),
                ),
                ("provider_message_id", models.CharField(blank=True, db_index=True, default="", max_length=255)),
                ("error", models.TextField(blank=True, default="")),
                ("sent_at", models.DateTimeField(default=django.utils.timezone.now)),
                (
                    "contact",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="invitation_logs",
                        to="events.contact",
                    ),
                ),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="invitation_logs",
                        to="events.event",
                    ),
                ),
            ],
            options={
                "ordering": ["-sent_at"],
            },
        ),
        migrations.CreateModel(
            name="TicketTier",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True, db_index=True)),
                ("name", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True, default="")),
                (
                    "price_cents",
                    models.PositiveIntegerField(default=0, help_text="0 means the tier is free (RSVP)."),
                ),
                (
                    "quantity_total",
                    models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)]),
                ),
                ("quantity_sold", models.PositiveIntegerField(default=0)),
                (
                    "max_per_contact",
                    models.PositiveIntegerField(
                        blank=True,
                        help_text="Null means no per-contact cap.",
                        null=True,
                        validators=[django.core.validators.MinValueValidator(1)],
                    ),
                ),
                ("stripe_product_id", models.CharField(blank=True, default="", max_length=255)),
                ("stripe_price_id", models.CharField(blank=True, default="", max_length=255)),
                ("sort_order", models.PositiveIntegerField(db_index=True, default=0)),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="ticket_tiers",
                        to="events.event",
                    ),
                ),
            ],
            options={
                "ordering": ["sort_order", "created_at"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(("quantity_sold__lte", models.F("quantity_total"))),
                        name="tier_quantity_sold_within_total",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Ticket",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True, db_index=True)),
                ("attendee_name", models.CharField(max_length=500)),
                ("attendee_email", models.EmailField(blank=True, db_index=True, default="", max_length=254)),
                ("attendee_phone", models.CharField(blank=True, default="", max_length=30)),
                (
                    "ticket_code",
                    models.CharField(
                        default=events.models.ticket.generate_ticket_code, editable=False, max_length=16, unique=True
                    ),
                ),
                (
                    "quantity",
                    models.PositiveIntegerField(default=1, validators=[django.core.validators.MinValueValidator(1)]),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("pending", "Pending"),
                            ("confirmed", "Confirmed"),
                            ("checked_in", "Checked In"),
                            ("cancelled", "Cancelled"),
                            ("refunded", "Refunded"),
                        ],
                        db_index=True,
                        default="pending",
                        max_length=20,
                    ),
                ),
                (
                    "inventory_counted",
                    models.BooleanField(
                        default=False, help_text="Whether this ticket's seats have been added to the tier's sold count."
                    ),
                ),
                ("stripe_session_id", models.CharField(blank=True, db_index=True, default="", max_length=255)),
                ("stripe_payment_intent_id", models.CharField(blank=True, db_index=True, default="", max_length=255)),
                ("amount_paid_cents", models.PositiveIntegerField(default=0)),
                ("purchased_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("checked_in_at", models.DateTimeField(blank=True, null=True)),
                (
                    "contact",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="tickets",
                        to="events.contact",
                    ),
                ),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        help_text="Team member who issued a walk-in ticket.",
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="created_tickets",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "event",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE, related_name="tickets", to="events.event"
                    ),
                ),
                (
                    "tier",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT, related_name="tickets", to="events.tickettier"
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
            },
        ),
    ]
