"""Tests for the API root: version, healthcheck and the error envelope."""

import orjson
import pytest
from django.conf import settings
from django.core.exceptions import ValidationError
from django.http import Http404, HttpRequest
from django.test import RequestFactory
from django.test.client import Client
from django.urls import reverse

from api import exception_handlers
from events.exceptions import RejectionReason, ReservationRejectedError


@pytest.mark.django_db
def test_version(client: Client) -> None:
    response = client.get(reverse("api:version"))

    assert response.status_code == 200
    assert response.json() == {"version": settings.VERSION}


@pytest.mark.django_db
def test_healthcheck(client: Client) -> None:
    response = client.get(reverse("api:healthcheck"))

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


class TestExceptionHandlers:
    @pytest.fixture
    def rf_request(self) -> HttpRequest:
        return RequestFactory().post("/api/anything")

    def test_general_exception_hides_details(self, rf_request: HttpRequest, caplog: pytest.LogCaptureFixture) -> None:
        response = exception_handlers.handle_general_exception(rf_request, RuntimeError("db password leaked"))

        assert response.status_code == 500
        assert orjson.loads(response.content) == {"success": False, "error": "Internal Server Error."}
        assert "internal_server_error" in caplog.text

    def test_django_validation_error_with_fields(self, rf_request: HttpRequest) -> None:
        exc = ValidationError({"date_end": ["End date must be after start date"]})

        response = exception_handlers.handle_django_validation_error(rf_request, exc)

        body = orjson.loads(response.content)
        assert response.status_code == 400
        assert body["error"] == "End date must be after start date"
        assert body["errors"] == {"date_end": ["End date must be after start date"]}

    def test_plain_django_validation_error(self, rf_request: HttpRequest) -> None:
        response = exception_handlers.handle_django_validation_error(rf_request, ValidationError("Nope"))

        assert response.status_code == 400
        assert orjson.loads(response.content)["error"] == "Nope"

    def test_reservation_rejection_carries_reason(self, rf_request: HttpRequest) -> None:
        exc = ReservationRejectedError(RejectionReason.SOLD_OUT, "This tier is sold out.")

        response = exception_handlers.handle_reservation_rejected_error(rf_request, exc)

        assert response.status_code == 400
        assert orjson.loads(response.content) == {
            "success": False,
            "error": "This tier is sold out.",
            "reason": "sold_out",
        }

    def test_not_found(self, rf_request: HttpRequest) -> None:
        response = exception_handlers.handle_not_found(rf_request, Http404())

        assert response.status_code == 404
        assert orjson.loads(response.content)["error"] == "Not found."
