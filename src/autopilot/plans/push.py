"""Plan for replacing a live app with a new version (deploy-replace)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Optional

from ..cf.models import DeploymentOptions
from ..errors import MissingManifestError, NoRoutesError, RemoteCallError
from ..rewind import ActionStep
from ..utils.logging import get_logger
from .naming import venerable_app_name

if TYPE_CHECKING:
    from ..cf.repo import ApplicationRepo

logger = get_logger(__name__)


@dataclass
class ReplaceRequest:
    """Arguments of a deploy-replace invocation."""

    app_name: str
    manifest_path: str
    app_path: Optional[str] = None
    options: DeploymentOptions = field(default_factory=DeploymentOptions)


def build_push_actions(repo: "ApplicationRepo", request: ReplaceRequest) -> List[ActionStep]:
    """Decide between a plain push and a blue-green replace.

    Queries whether the app already exists; nothing else is changed remotely
    until the returned steps are executed.
    """
    if not request.manifest_path:
        raise MissingManifestError()

    if repo.does_app_exist(request.app_name):
        logger.info("Found live app %s, replacing it", request.app_name)
        return actions_for_existing_app(repo, request)

    logger.info("App %s does not exist yet, pushing it", request.app_name)
    return actions_for_new_app(repo, request)


def actions_for_new_app(repo: "ApplicationRepo", request: ReplaceRequest) -> List[ActionStep]:
    return [
        ActionStep(
            forward=lambda: repo.push_application(
                request.app_name, request.manifest_path, request.app_path
            ),
            description=f"push {request.app_name}",
        ),
    ]


def actions_for_existing_app(repo: "ApplicationRepo", request: ReplaceRequest) -> List[ActionStep]:
    app_name = request.app_name
    venerable = venerable_app_name(app_name)

    def delete_stale_venerable() -> None:
        if repo.does_app_exist(venerable):
            logger.info("Found old version of app running, deleting.")
            repo.delete_application(venerable)

    def push_new_version() -> None:
        repo.push_application(app_name, request.manifest_path, request.app_path)

    def discard_new_version() -> None:
        repo.delete_application(app_name)

    def restore_live() -> None:
        # A push that failed to start still leaves an app holding the live name.
        # The rename back is always attempted; it fails on its own if that app is still there.
        try:
            if repo.does_app_exist(app_name):
                repo.delete_application(app_name)
        except RemoteCallError as exc:
            logger.warning("Could not remove partially pushed %s: %s", app_name, exc)
        repo.rename_application(venerable, app_name)

    def finalize_venerable() -> None:
        strategy = request.options.finalize_strategy
        if strategy == "stop":
            logger.info(
                "Stopping old version of app. Remove the --keep-existing-app flag to delete it automatically."
            )
            repo.stop_application(venerable)
        elif strategy == "unmap":
            logger.info(
                "Unmapping routes for the venerable app. Remove the --unmap-routes flag to delete the old version."
            )
            try:
                route = repo.find_routes(venerable)
            except NoRoutesError:
                logger.warning("%s has no routes, nothing to unmap", venerable)
                return
            repo.unmap_routes(venerable, route)
        else:
            logger.info("Deleting old version of app. Use the --keep-existing-app flag to preserve it.")
            repo.delete_application(venerable)

    return [
        ActionStep(
            forward=delete_stale_venerable,
            description=f"remove stale {venerable}",
        ),
        ActionStep(
            forward=lambda: repo.rename_application(app_name, venerable),
            reverse=restore_live,
            description=f"rename {app_name} to {venerable}",
        ),
        ActionStep(
            forward=push_new_version,
            reverse=discard_new_version,
            description=f"push new version of {app_name}",
        ),
        ActionStep(
            forward=finalize_venerable,
            description=f"{request.options.finalize_strategy} {venerable}",
        ),
    ]
