"""Plan for reverting to the venerable version (deploy-rollback)."""

from __future__ import annotations

from typing import TYPE_CHECKING, List

from ..errors import NoRoutesError, ValidationError
from ..rewind import ActionStep
from ..utils.logging import get_logger
from .naming import rollback_app_name, venerable_app_name

if TYPE_CHECKING:
    from ..cf.repo import ApplicationRepo

logger = get_logger(__name__)


def validate_rollback(repo: "ApplicationRepo", app_name: str) -> None:
    """Raise ValidationError unless both the live and venerable apps exist."""
    app_exists = repo.does_app_exist(app_name)
    venerable_exists = repo.does_app_exist(venerable_app_name(app_name))

    if not app_exists:
        raise ValidationError(f"Live version of app \"{app_name}\" not found, cannot rollback.")
    if not venerable_exists:
        raise ValidationError(
            f"Venerable version of \"{app_name}\" not found, cannot rollback. Make sure you push with the "
            "--keep-existing-app flag to leave the venerable version behind."
        )


def _route_count(repo: "ApplicationRepo", app_name: str) -> int:
    try:
        return len(repo.find_routes(app_name).hosts)
    except NoRoutesError:
        return 0


def _move_routes(repo: "ApplicationRepo", source: str, target: str) -> None:
    route = repo.find_routes(source)
    repo.map_routes(target, route)
    repo.unmap_routes(source, route)


def build_rollback_actions(repo: "ApplicationRepo", app_name: str) -> List[ActionStep]:
    """Steps that swap the venerable app back in and discard the current one.

    Route reconciliation only moves routes when the receiving app has none,
    so the app about to go live always ends up with the live app's routes.
    """
    venerable = venerable_app_name(app_name)
    rolled_back = rollback_app_name(app_name)

    def reconcile_routes() -> None:
        if _route_count(repo, venerable) == 0:
            logger.info("%s has no routes, moving routes from %s", venerable, rolled_back)
            _move_routes(repo, rolled_back, venerable)

    def restore_routes() -> None:
        if _route_count(repo, rolled_back) == 0:
            _move_routes(repo, venerable, rolled_back)

    return [
        ActionStep(
            forward=lambda: repo.rename_application(app_name, rolled_back),
            reverse=lambda: repo.rename_application(rolled_back, app_name),
            description=f"rename {app_name} to {rolled_back}",
        ),
        ActionStep(
            forward=reconcile_routes,
            reverse=restore_routes,
            description=f"reconcile routes of {venerable}",
        ),
        ActionStep(
            forward=lambda: repo.rename_application(venerable, app_name),
            reverse=lambda: repo.rename_application(app_name, venerable),
            description=f"rename {venerable} to {app_name}",
        ),
        ActionStep(
            forward=lambda: repo.start_application(app_name),
            description=f"start {app_name}",
        ),
        ActionStep(
            forward=lambda: repo.delete_application(rolled_back),
            description=f"delete {rolled_back}",
        ),
    ]
