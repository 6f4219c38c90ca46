"""Tests for request validation rules and pipeline."""

import pytest

from neo_identity.application import requests as rq
from neo_identity.application.validators import RequestValidator, rules
from neo_identity.core.exceptions import ValidationError


class TestPasswordRules:
    """Test password complexity rules."""

    @pytest.mark.parametrize("password", ["Str0ng!Pass", "Aa1$aaaa", "P@ssw0rd-2024", "Xy9(abcd)"])
    def test_valid_new_passwords(self, password):
        assert rules.new_password(password) == []

    def test_digit_class_is_a_real_digit(self):
        """A literal 'd' does not satisfy the digit requirement."""
        assert "must contain a digit" in rules.new_password("Password!d")
        assert rules.new_password("Passw0rd!") == []

    def test_digit_class_is_ascii_only(self):
        assert "must contain a digit" in rules.new_password("Abcdefg\u0663!")

    def test_reports_every_broken_constraint(self):
        messages = rules.new_password("abc")
        assert "must be at least 8 characters long" in messages
        assert "must contain an uppercase letter" in messages
        assert "must contain a digit" in messages
        assert any("symbols" in m for m in messages)

    def test_rejects_disallowed_characters(self):
        messages = rules.new_password("Str0ng!Pass word")
        assert any(m.startswith("may only contain") for m in messages)

    def test_rejects_missing_lowercase(self):
        assert rules.new_password("STR0NG!PASS") == ["must contain a lowercase letter"]

    def test_presented_password_only_checks_presence(self):
        assert rules.presented_password("weak") == []
        assert rules.presented_password("") == ["must not be empty"]
        assert rules.presented_password(None) == ["must not be empty"]


class TestFieldRules:
    """Test individual field rules."""

    @pytest.mark.parametrize("code", ["123456", "000000"])
    def test_valid_confirmation_codes(self, code):
        assert rules.confirmation_code(code) == []

    @pytest.mark.parametrize("code", ["12a456", "12345", "1234567", "123456\n", "", None, 123456, "١٢٣٤٥٦"])
    def test_invalid_confirmation_codes(self, code):
        assert rules.confirmation_code(code) == ["must be exactly 6 digits"]

    def test_email(self):
        assert rules.email_address("user@acme.io") == []
        assert rules.email_address("") == ["must not be empty"]
        assert rules.email_address("not-an-email") == ["must be a valid email address"]

    def test_mfa_type(self):
        assert rules.mfa_type("sms") == []
        assert rules.mfa_type("totp") == []
        assert rules.mfa_type("SMS") != []
        assert rules.mfa_type("email") != []

    def test_positive_integer_rejects_booleans(self):
        assert rules.positive_integer(10) == []
        assert rules.positive_integer(0) != []
        assert rules.positive_integer(-1) != []
        assert rules.positive_integer(True) != []
        assert rules.positive_integer("5") != []

    def test_attribute_names(self):
        assert rules.attribute_names(["name", "locale"]) == []
        assert rules.attribute_names([]) == ["must not be empty"]
        assert rules.attribute_names("name") != []
        assert rules.attribute_names(["name", ""]) != []

    def test_attribute_values(self):
        assert rules.non_empty_attribute_values({"name": "Ada"}) == []
        assert rules.non_empty_attribute_values({}) == ["must not be empty"]
        assert rules.attribute_values({"age": 42}) == ["attribute values must be strings"]


class TestRequestValidator:
    """Test the per-request validation pipeline."""

    @pytest.fixture
    def validator(self):
        return RequestValidator()

    def test_valid_request_passes_unchanged(self, validator):
        request = rq.RegisterUserRequest(email="user@acme.io", password="Str0ng!Pass", attributes={"name": "Ada"})
        assert validator.validate(request) is request

    def test_collects_every_violated_field(self, validator):
        request = rq.ConfirmPasswordRequest(email="nope", confirmation_code="12a456", new_password="short")

        with pytest.raises(ValidationError) as exc_info:
            validator.validate(request)

        error = exc_info.value
        assert error.fields == ["email", "confirmation_code", "new_password"]
        assert error.messages_for("confirmation_code") == ["must be exactly 6 digits"]
        assert error.error_code == "validation_failed"
        assert len(error.details["violations"]) == len(error.violations)

    def test_list_devices_limit_and_token(self, validator):
        with pytest.raises(ValidationError) as exc_info:
            validator.validate(rq.ListDevicesRequest(email="user@acme.io", limit=-1, pagination_token=""))
        assert exc_info.value.fields == ["limit", "pagination_token"]

        request = rq.ListDevicesRequest(email="user@acme.io", limit=10)
        assert validator.validate(request) is request

    def test_mfa_challenge_response(self, validator):
        with pytest.raises(ValidationError) as exc_info:
            validator.validate(
                rq.RespondToMfaChallengeRequest(
                    email="user@acme.io", code="654321", session="", challenge_name="NEW_PASSWORD_REQUIRED"
                )
            )
        assert exc_info.value.fields == ["session", "challenge_name"]

    def test_register_from_payload_splits_attributes(self, validator):
        request = rq.RegisterUserRequest.from_payload(
            {"email": "user@acme.io", "password": "Str0ng!Pass", "name": "Ada", "locale": "en"}
        )
        assert request.attributes == {"name": "Ada", "locale": "en"}
        assert validator.validate(request) is request

    def test_unknown_request_type(self, validator):
        with pytest.raises(TypeError):
            validator.check(object())

    def test_custom_rules(self):
        validator = RequestValidator()
        validator.register(rq.GetUserDataRequest, ("email", rules.non_empty_string))
        request = rq.GetUserDataRequest(email="not-an-email")
        assert validator.validate(request) is request

    def test_password_is_not_in_repr(self):
        request = rq.AuthenticateUserRequest(email="user@acme.io", password="Str0ng!Pass")
        assert "Str0ng" not in repr(request)
