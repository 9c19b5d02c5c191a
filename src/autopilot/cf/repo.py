"""Application lifecycle operations backed by the `cf` CLI."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional

from ..config import CFConfig
from ..errors import RemoteCallError, NoRoutesError
from ..utils.logging import get_logger
from .models import Route
from .runner import CFCli

logger = get_logger(__name__)


class ApplicationRepo:
    """Wraps the `cf` commands autopilot needs against the targeted space.

    Every method either returns normally or raises a RemoteCallError naming
    the operation and the app it was working on.
    """

    def __init__(self, cli: CFCli, config: Optional[CFConfig] = None) -> None:
        self.cli = cli
        self.config = config or CFConfig()

    def rename_application(self, old_name: str, new_name: str) -> None:
        logger.info("Renaming %s to %s", old_name, new_name)
        self.cli.run(["rename", old_name, new_name], app_name=old_name)

    def push_application(self, app_name: str, manifest_path: str, app_path: Optional[str] = None) -> None:
        args = ["push", app_name, "-f", manifest_path]
        if app_path:
            args.extend(["-p", app_path])
        logger.info("Pushing %s with manifest %s", app_name, manifest_path)
        self.cli.run(args, app_name=app_name)

    def delete_application(self, app_name: str) -> None:
        logger.info("Deleting %s", app_name)
        self.cli.run(["delete", app_name, "-f"], app_name=app_name)

    def start_application(self, app_name: str) -> None:
        logger.info("Starting %s", app_name)
        self.cli.run(["start", app_name], app_name=app_name)

    def stop_application(self, app_name: str) -> None:
        logger.info("Stopping %s", app_name)
        self.cli.run(["stop", app_name], app_name=app_name)

    def list_applications(self) -> str:
        return self.cli.run(["apps"])

    def map_routes(self, app_name: str, route: Route) -> None:
        if route.is_empty:
            raise NoRoutesError("map routes", app_name, "There are no routes to add.")
        logger.info("Mapping %s to %s", ", ".join(route.urls()), app_name)
        for host in route.hosts:
            self.cli.run(["map-route", app_name, route.domain, "--hostname", host], app_name=app_name)

    def unmap_routes(self, app_name: str, route: Route) -> None:
        if route.is_empty:
            raise NoRoutesError("unmap routes", app_name, "No routes in the app.")
        logger.info("Unmapping %s from %s", ", ".join(route.urls()), app_name)
        for host in route.hosts:
            self.cli.run(["unmap-route", app_name, route.domain, "--hostname", host], app_name=app_name)

    def find_routes(self, app_name: str) -> Route:
        guid = self._app_guid(app_name)
        resources = self._curl_resources(f"/v2/apps/{guid}/routes", "find routes", app_name)
        if not resources:
            raise NoRoutesError("find routes", app_name, "No routes for this app.")

        hosts = [resource["entity"]["host"] for resource in resources]
        domain = self.config.route_domain or self._domain_name(resources[0], app_name)
        return Route(domain=domain, hosts=hosts)

    def does_app_exist(self, app_name: str) -> bool:
        payload = self._query_app(app_name, "check existence")

        if "total_results" not in payload:
            raise RemoteCallError("check existence", app_name, "Missing total_results from api response")
        total_results = payload["total_results"]
        if isinstance(total_results, bool) or not isinstance(total_results, (int, float)):
            raise RemoteCallError(
                "check existence", app_name, f"total_results didn't have a number {total_results!r}"
            )
        return total_results == 1

    def current_space_guid(self) -> str:
        path = self.config.cf_config_path()
        try:
            with path.open("r", encoding="utf-8") as handle:
                data = json.load(handle)
        except FileNotFoundError as exc:
            raise RemoteCallError(
                "read current space", None, f"cf config not found at {path}, run `cf login` first"
            ) from exc
        except ValueError as exc:
            raise RemoteCallError("read current space", None, f"cannot parse {path}: {exc}") from exc

        guid = (data.get("SpaceFields") or {}).get("GUID")
        if not guid:
            raise RemoteCallError("read current space", None, "no space targeted, run `cf target -s SPACE`")
        return guid

    def _query_app(self, app_name: str, operation: str) -> Dict[str, Any]:
        space_guid = self.current_space_guid()
        return self._curl_json(f"/v2/apps?q=name:{app_name}&q=space_guid:{space_guid}", operation, app_name)

    def _app_guid(self, app_name: str) -> str:
        resources = self._query_app(app_name, "find routes").get("resources") or []
        if not resources:
            raise RemoteCallError("find routes", app_name, "app not found")
        return resources[0]["metadata"]["guid"]

    def _domain_name(self, route_resource: Dict[str, Any], app_name: str) -> str:
        domain_url = route_resource["entity"]["domain_url"]
        return self._curl_json(domain_url, "find routes", app_name)["entity"]["name"]

    def _curl_resources(self, path: str, operation: str, app_name: str) -> List[Dict[str, Any]]:
        resources: List[Dict[str, Any]] = []
        next_url: Optional[str] = path
        while next_url:
            page = self._curl_json(next_url, operation, app_name)
            resources.extend(page.get("resources") or [])
            next_url = page.get("next_url")
        return resources

    def _curl_json(self, path: str, operation: str, app_name: str) -> Dict[str, Any]:
        output = self.cli.run(["curl", path], app_name=app_name)
        try:
            payload = json.loads(output)
        except ValueError as exc:
            raise RemoteCallError(operation, app_name, f"malformed api response: {exc}") from exc
        if not isinstance(payload, dict):
            raise RemoteCallError(operation, app_name, "unexpected api response")
        if "error_code" in payload:
            raise RemoteCallError(
                operation, app_name, payload.get("description") or payload["error_code"]
            )
        return payload
