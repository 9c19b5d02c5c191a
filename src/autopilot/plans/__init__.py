"""Builders that turn a request into an ordered list of ActionSteps."""

from .naming import rollback_app_name, venerable_app_name
from .push import ReplaceRequest, build_push_actions
from .rollback import build_rollback_actions, validate_rollback

__all__ = [
    "ReplaceRequest",
    "build_push_actions",
    "build_rollback_actions",
    "rollback_app_name",
    "validate_rollback",
    "venerable_app_name",
]
