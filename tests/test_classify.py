"""
Tests for response classification.
"""

import pytest

from turso_client import (
    APIError,
    NotOrganizationMemberError,
    NotFoundError,
    NameUnavailableError,
    PaymentRequiredError,
    ValidationError,
    PermissionDeniedError,
)
from turso_client.api import Operation, classify_response

from conftest import make_response

GET_GROUP = Operation("get database group", "group", "default")
CREATE_DB = Operation("create database", "database", "taken-name", creates=True)


class TestSuccess:
    """Tests for successful responses."""

    def test_200_is_not_an_error(self):
        """Test that 200 yields no error."""
        assert classify_response(make_response(200, {}), org="acme", operation=GET_GROUP) is None

    @pytest.mark.parametrize("status", [201, 204])
    def test_other_2xx_are_errors(self, status):
        """Test that only 200 counts as success."""
        error = classify_response(make_response(status), org="", operation=GET_GROUP)
        assert isinstance(error, ValidationError)


class TestMembership:
    """Tests for the organization membership check."""

    @pytest.mark.parametrize("body", [None, {"error": "forbidden"}, b"<html>", {"anything": 1}])
    def test_403_with_org(self, body):
        """Test that any 403 under an organization means not a member."""
        error = classify_response(make_response(403, body), org="acme", operation=GET_GROUP)

        assert isinstance(error, NotOrganizationMemberError)
        assert error.org == "acme"
        assert "acme" in str(error)
        assert error.status_code == 403

    def test_403_wins_over_create(self):
        """Test that membership is checked before status-specific rules."""
        error = classify_response(make_response(403), org="acme", operation=CREATE_DB)
        assert isinstance(error, NotOrganizationMemberError)

    def test_403_without_org(self):
        """Test that a 403 without organization is a generic rejection."""
        error = classify_response(
            make_response(403, {"error": "insufficient role"}),
            org="",
            operation=GET_GROUP,
        )

        assert isinstance(error, PermissionDeniedError)
        assert isinstance(error, ValidationError)
        assert not isinstance(error, NotOrganizationMemberError)
        assert "insufficient role" in str(error)


class TestStatusLadder:
    """Tests for status-specific errors."""

    @pytest.mark.parametrize("org", ["", "acme"])
    def test_404(self, org):
        """Test not found with the identifier attached."""
        error = classify_response(make_response(404), org=org, operation=GET_GROUP)

        assert isinstance(error, NotFoundError)
        assert error.identifier == "default"
        assert "group 'default' not found" in str(error)

    def test_422_on_create(self):
        """Test that 422 on create means the name is taken."""
        error = classify_response(make_response(422), org="", operation=CREATE_DB)

        assert isinstance(error, NameUnavailableError)
        assert "taken-name" in str(error)

    def test_409_on_create(self):
        """Test that a conflict on create means the name is taken."""
        error = classify_response(make_response(409), org="", operation=CREATE_DB)
        assert isinstance(error, NameUnavailableError)

    def test_422_not_on_create(self):
        """Test that 422 elsewhere is a validation error."""
        error = classify_response(
            make_response(422, {"error": "bad expiration"}),
            org="",
            operation=GET_GROUP,
        )

        assert type(error) is ValidationError
        assert "bad expiration" in str(error)

    def test_402(self):
        """Test payment required."""
        error = classify_response(make_response(402), org="acme", operation=CREATE_DB)
        assert isinstance(error, PaymentRequiredError)

    @pytest.mark.parametrize("status", [400, 401, 409, 429, 500, 503])
    def test_other_statuses(self, status):
        """Test that everything else is a validation error."""
        error = classify_response(make_response(status), org="", operation=GET_GROUP)

        assert type(error) is ValidationError
        assert error.status_code == status
        assert isinstance(error, APIError)


class TestErrorMessage:
    """Tests for server message extraction."""

    def test_server_message(self):
        """Test that the server's error field is used."""
        error = classify_response(
            make_response(400, {"error": "location is required"}),
            org="",
            operation=GET_GROUP,
        )

        assert error.message == "failed to get database group: location is required"
        assert error.response_data == {"error": "location is required"}

    @pytest.mark.parametrize("body", [None, b"oops", b"[1, 2]", {"message": "no error key"}])
    def test_falls_back_to_status_line(self, body):
        """Test the raw status text fallback."""
        error = classify_response(make_response(500, body), org="", operation=GET_GROUP)
        assert error.message == "failed to get database group: 500 Internal Server Error"

    def test_status_in_rendered_message(self):
        """Test that the status code is part of the message."""
        error = classify_response(make_response(400), org="", operation=GET_GROUP)
        assert str(error).endswith("[HTTP 400]")
