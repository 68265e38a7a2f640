import orjson
import pytest
from django.shortcuts import reverse  # type: ignore[attr-defined]
from django.test.client import Client

from common.models import SiteSettings

pytestmark = pytest.mark.django_db


def test_helper_can_read_settings(helper_client: Client) -> None:
    response = helper_client.get(reverse("api:get_settings"))

    assert response.status_code == 200
    assert response.json()["data"]["venue_name"] == "The Barn"


def test_admin_updates_settings(team_admin_client: Client) -> None:
    payload = {"venue_name": "  Old Mill  ", "default_host_bio": "Your hosts for the night."}

    response = team_admin_client.put(
        reverse("api:update_settings"), data=orjson.dumps(payload), content_type="application/json"
    )

    assert response.status_code == 200
    site_settings = SiteSettings.get_solo()
    assert site_settings.venue_name == "Old Mill"
    assert site_settings.default_host_bio == "Your hosts for the night."


def test_helper_cannot_update_settings(helper_client: Client) -> None:
    response = helper_client.put(
        reverse("api:update_settings"),
        data=orjson.dumps({"venue_name": "Nope"}),
        content_type="application/json",
    )

    assert response.status_code == 403
    assert response.json()["error"] == "Only team admins can perform this action."


def test_anonymous_cannot_read_settings(client: Client) -> None:
    assert client.get(reverse("api:get_settings")).status_code == 401
