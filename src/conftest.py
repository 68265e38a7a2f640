"""Shared fixtures for the whole test suite."""

import secrets
import string
import typing as t
from datetime import timedelta

import faker
import pytest
from django.core.cache import cache
from django.test.client import Client
from django.utils import timezone
from ninja_jwt.tokens import RefreshToken
from pytest import MonkeyPatch

from accounts.models import GuestlistUser, TeamMember
from events.models import Event, TicketTier


@pytest.fixture(autouse=True)
def enable_celery_eager_mode(settings: t.Any) -> None:
    """Run Celery tasks synchronously so tests can assert on their side effects."""
    settings.CELERY_TASK_ALWAYS_EAGER = True
    settings.CELERY_TASK_EAGER_PROPAGATES = True


@pytest.fixture(autouse=True)
def messaging_dry_run(settings: t.Any) -> None:
    """Never reach Resend or Twilio from tests. Channel tests switch this off and mock the SDKs."""
    settings.MESSAGING_DRY_RUN = True


@pytest.fixture(autouse=True)
def clear_cache() -> None:
    """Throttle counters live in the cache."""
    cache.clear()


@pytest.fixture(autouse=True)
def increase_rate_limit(monkeypatch: MonkeyPatch) -> None:
    monkeypatch.setattr("common.throttling.CheckoutThrottle.rate", "1000/min")
    monkeypatch.setattr("common.throttling.AnonDefaultThrottle.rate", "1000/min")


class GuestlistUserFactory:
    """Factory for creating GuestlistUser instances for testing."""

    fake = faker.Faker()

    def create_user(self, **kwargs: t.Any) -> GuestlistUser:
        username = kwargs.pop("username", "".join(secrets.choice(string.ascii_lowercase) for _ in range(8)))
        email = kwargs.pop("email", f"{username}@test.com")
        return GuestlistUser.objects.create_user(
            username=username,
            email=email,
            password=kwargs.pop("password", "password"),
            first_name=kwargs.pop("first_name", self.fake.first_name()),
            last_name=kwargs.pop("last_name", self.fake.last_name()),
            **kwargs,
        )

    def __call__(self, **kwargs: t.Any) -> GuestlistUser:
        return self.create_user(**kwargs)


@pytest.fixture
def user_factory() -> GuestlistUserFactory:
    return GuestlistUserFactory()


@pytest.fixture
def team_admin(user_factory: GuestlistUserFactory) -> GuestlistUser:
    user = user_factory(username="host")
    TeamMember.objects.create(user=user, role=TeamMember.Role.ADMIN)
    return user


@pytest.fixture
def team_helper(user_factory: GuestlistUserFactory) -> GuestlistUser:
    user = user_factory(username="door")
    TeamMember.objects.create(user=user, role=TeamMember.Role.HELPER)
    return user


@pytest.fixture
def outsider(user_factory: GuestlistUserFactory) -> GuestlistUser:
    """An authenticated user without a team membership."""
    return user_factory(username="stranger")


def _client_for(user: GuestlistUser) -> Client:
    refresh = RefreshToken.for_user(user)
    return Client(HTTP_AUTHORIZATION=f"Bearer {refresh.access_token}")  # type: ignore[attr-defined]


@pytest.fixture
def team_admin_client(team_admin: GuestlistUser) -> Client:
    return _client_for(team_admin)


@pytest.fixture
def helper_client(team_helper: GuestlistUser) -> Client:
    return _client_for(team_helper)


@pytest.fixture
def outsider_client(outsider: GuestlistUser) -> Client:
    return _client_for(outsider)


@pytest.fixture
def event(team_admin: GuestlistUser) -> Event:
    """A published event next week."""
    start = timezone.now() + timedelta(days=7)
    return Event.objects.create(
        title="Harvest Dinner",
        slug="harvest-dinner-abc123",
        event_type=Event.EventType.DINNER,
        date_start=start,
        date_end=start + timedelta(hours=4),
        location_name="The Barn",
        capacity=100,
        status=Event.Status.PUBLISHED,
        created_by=team_admin,
    )


@pytest.fixture
def past_event(team_admin: GuestlistUser) -> Event:
    start = timezone.now() - timedelta(days=2)
    return Event.objects.create(
        title="Summer Concert",
        slug="summer-concert-xyz789",
        event_type=Event.EventType.CONCERT,
        date_start=start,
        date_end=start + timedelta(hours=3),
        status=Event.Status.PUBLISHED,
        created_by=team_admin,
    )


@pytest.fixture
def free_tier(event: Event) -> TicketTier:
    return TicketTier.objects.create(event=event, name="General Admission", price_cents=0, quantity_total=10)


@pytest.fixture
def paid_tier(event: Event) -> TicketTier:
    return TicketTier.objects.create(
        event=event,
        name="Dinner Seat",
        price_cents=4500,
        quantity_total=20,
        max_per_contact=2,
        stripe_product_id="prod_test",
        stripe_price_id="price_test",
    )
