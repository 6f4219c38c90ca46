"""Request validation layer."""

from .request_validator import DEFAULT_RULES, FieldRule, RequestValidator
from . import rules

__all__ = [
    "DEFAULT_RULES",
    "FieldRule",
    "RequestValidator",
    "rules",
]
