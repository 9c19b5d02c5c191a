"""Names of the extra apps that exist while a workflow is in flight."""

from __future__ import annotations

VENERABLE_SUFFIX = "-venerable"
ROLLBACK_SUFFIX = "-rollback"


def venerable_app_name(app_name: str) -> str:
    """The previous version, renamed aside during a replace."""
    return f"{app_name}{VENERABLE_SUFFIX}"


def rollback_app_name(app_name: str) -> str:
    """The live app, renamed aside while a rollback is in progress."""
    return f"{app_name}{ROLLBACK_SUFFIX}"
