"""Per-request validation pipeline."""

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple, Type

from ...core.exceptions import FieldViolation, ValidationError
from .. import requests as rq
from . import rules
from .rules import Rule

logger = logging.getLogger(__name__)

FieldRule = Tuple[str, Rule]

_EMAIL: FieldRule = ("email", rules.email_address)

DEFAULT_RULES: Dict[Type[Any], Sequence[FieldRule]] = {
    rq.RegisterUserRequest: (
        _EMAIL,
        ("password", rules.new_password),
        ("attributes", rules.attribute_values),
    ),
    rq.ConfirmRegistrationRequest: (
        _EMAIL,
        ("confirmation_code", rules.confirmation_code),
        ("force_alias_creation", rules.boolean),
    ),
    rq.ResendConfirmationRequest: (_EMAIL,),
    rq.AuthenticateUserRequest: (
        _EMAIL,
        ("password", rules.presented_password),
    ),
    rq.RespondToMfaChallengeRequest: (
        _EMAIL,
        ("code", rules.confirmation_code),
        ("session", rules.non_empty_string),
        ("challenge_name", rules.challenge_name),
    ),
    rq.GetUserDataRequest: (_EMAIL,),
    rq.ForgotPasswordRequest: (_EMAIL,),
    rq.ConfirmPasswordRequest: (
        _EMAIL,
        ("confirmation_code", rules.confirmation_code),
        ("new_password", rules.new_password),
    ),
    rq.ChangePasswordRequest: (
        _EMAIL,
        ("current_password", rules.presented_password),
        ("new_password", rules.new_password),
    ),
    rq.SignOutRequest: (_EMAIL,),
    rq.GlobalSignOutRequest: (_EMAIL,),
    rq.SetUserMfaPreferenceRequest: (
        _EMAIL,
        ("type", rules.mfa_type),
    ),
    rq.DisableMfaRequest: (_EMAIL,),
    rq.GetDeviceRequest: (_EMAIL,),
    rq.ListDevicesRequest: (
        _EMAIL,
        ("limit", rules.positive_integer),
        ("pagination_token", rules.optional_non_empty_string),
    ),
    rq.SetDeviceStatusRememberedRequest: (_EMAIL,),
    rq.SetDeviceStatusNotRememberedRequest: (_EMAIL,),
    rq.ForgetDeviceRequest: (_EMAIL,),
    rq.DeleteUserRequest: (_EMAIL,),
    rq.GetUserAttributesRequest: (_EMAIL,),
    rq.UpdateAttributesRequest: (
        _EMAIL,
        ("attributes", rules.non_empty_attribute_values),
    ),
    rq.DeleteAttributesRequest: (
        _EMAIL,
        ("attribute_list", rules.attribute_names),
    ),
}


class RequestValidator:
    """Validator for request records following maximum separation principle.

    Handles ONLY input shape rules, evaluated before any provider call.
    Every rule of the request type runs, so the resulting error lists every
    violated field rather than stopping at the first.
    """

    def __init__(self, field_rules: Optional[Dict[Type[Any], Sequence[FieldRule]]] = None):
        """Initialize validator.

        Args:
            field_rules: Rules per request type; defaults to DEFAULT_RULES
        """
        self._rules: Dict[Type[Any], Sequence[FieldRule]] = dict(field_rules or DEFAULT_RULES)

    def register(self, request_type: Type[Any], *field_rules: FieldRule) -> None:
        """Register (or replace) the rules for a request type."""
        self._rules[request_type] = tuple(field_rules)

    def rules_for(self, request_type: Type[Any]) -> Sequence[FieldRule]:
        for klass in request_type.__mro__:
            if klass in self._rules:
                return self._rules[klass]
        raise TypeError(f"No validation rules registered for {request_type.__name__}")

    def check(self, request: Any) -> List[FieldViolation]:
        """Evaluate every rule and collect violations.

        Args:
            request: Request record

        Returns:
            Violations in rule order; empty when the request is valid
        """
        violations = []
        for field_name, rule in self.rules_for(type(request)):
            value = getattr(request, field_name, None)
            for message in rule(value):
                violations.append(FieldViolation(field=field_name, message=message))
        return violations

    def validate(self, request: Any) -> Any:
        """Return the request unchanged or raise.

        Raises:
            ValidationError: Listing every violated field
        """
        violations = self.check(request)
        if violations:
            logger.debug(
                f"{type(request).__name__} rejected: "
                f"{', '.join(sorted({v.field for v in violations}))}"
            )
            raise ValidationError(violations)
        return request
