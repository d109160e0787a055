"""Tests for shared/exceptions.py."""

from shared.exceptions import (
    SportikoError,
    NotFoundError,
    ValidationError,
    AuthenticationError,
    AuthorizationError,
    ExternalServiceError,
    from_backend_error,
    is_no_rows_error,
    is_permission_denied,
)

from fakes import backend_error, permission_denied


class TestSportikoError:
    def test_message(self):
        """SportikoError should store message."""
        error = SportikoError("Test error")
        assert error.message == "Test error"
        assert str(error) == "Test error"

    def test_default_code(self):
        """SportikoError should default code to class name."""
        assert SportikoError("Test error").code == "SportikoError"

    def test_custom_code_and_details(self):
        error = SportikoError("Test error", code="CUSTOM_ERROR", details={"key": "value"})
        assert error.code == "CUSTOM_ERROR"
        assert error.details == {"key": "value"}

    def test_to_dict(self):
        """SportikoError should convert to dict."""
        error = SportikoError("Test error", code="TEST_ERROR", details={"key": "value"})
        assert error.to_dict() == {
            "error": "TEST_ERROR",
            "message": "Test error",
            "details": {"key": "value"},
        }

    def test_subclasses(self):
        for cls in (NotFoundError, ValidationError, AuthenticationError, AuthorizationError):
            assert isinstance(cls("x"), SportikoError)


class TestExternalServiceError:
    def test_service_in_details(self):
        error = ExternalServiceError("Service unavailable", service="supabase")
        assert error.service == "supabase"
        assert error.details["service"] == "supabase"


class TestBackendErrorTranslation:
    def test_no_rows_is_not_found(self):
        error = backend_error("JSON object requested, multiple (or no) rows returned", "PGRST116")
        assert is_no_rows_error(error)

        converted = from_backend_error(error, "load trainer", "trainers")
        assert isinstance(converted, NotFoundError)
        assert converted.details["resource"] == "trainers"

    def test_permission_denied_by_code(self):
        converted = from_backend_error(permission_denied(), "delete trainer")
        assert isinstance(converted, AuthorizationError)
        assert converted.code == "PERMISSION_DENIED"

    def test_permission_denied_by_message(self):
        """RLS rejections are recognised from the message text too."""
        error = backend_error("new row violates row-level security: permission denied", "XX000")
        assert is_permission_denied(error)

    def test_other_errors_are_external(self):
        converted = from_backend_error(backend_error("timeout"), "load ads", "ads")
        assert isinstance(converted, ExternalServiceError)
        assert converted.code == "BACKEND_ERROR"
        assert "timeout" in converted.message
        assert converted.details["backend_code"] == "XX000"

    def test_non_backend_exception(self):
        converted = from_backend_error(RuntimeError("socket closed"), "load ads")
        assert isinstance(converted, ExternalServiceError)
        assert "socket closed" in converted.message
