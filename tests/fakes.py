"""In-memory stand-ins for the platform used across the test suite."""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from autopilot.cf.models import Route
from autopilot.cf.runner import CFCli
from autopilot.errors import NoRoutesError, RemoteCallError

READ_ONLY = {"does_app_exist", "find_routes", "list_applications"}


class FakeRepo:
    """Models app names and their hosts, and records every call made."""

    def __init__(self, apps: Optional[Dict[str, List[str]]] = None, domain: str = "apps.example.com") -> None:
        self.apps: Dict[str, List[str]] = {name: list(hosts) for name, hosts in (apps or {}).items()}
        self.domain = domain
        self.calls: List[Tuple] = []
        self.failures: Dict[Tuple, Exception] = {}
        self.stopped: List[str] = []
        self.started: List[str] = []
        # a failing cf push normally leaves the app behind
        self.push_creates_app = True

    def fail_on(self, *call: str, error: Optional[Exception] = None) -> Exception:
        error = error or RemoteCallError(call[0], call[1] if len(call) > 1 else None, "boom")
        self.failures[tuple(call)] = error
        return error

    def mutations(self) -> List[Tuple]:
        return [call for call in self.calls if call[0] not in READ_ONLY]

    def _record(self, *call) -> None:
        self.calls.append(call)

    def _maybe_fail(self, *call) -> None:
        if call in self.failures:
            raise self.failures[call]

    def does_app_exist(self, app_name: str) -> bool:
        self._record("does_app_exist", app_name)
        self._maybe_fail("does_app_exist", app_name)
        return app_name in self.apps

    def rename_application(self, old_name: str, new_name: str) -> None:
        self._record("rename_application", old_name, new_name)
        self._maybe_fail("rename_application", old_name, new_name)
        if old_name not in self.apps or new_name in self.apps:
            raise RemoteCallError("rename", old_name, f"cannot rename to {new_name}")
        self.apps[new_name] = self.apps.pop(old_name)

    def push_application(self, app_name: str, manifest_path: str, app_path: Optional[str] = None) -> None:
        self._record("push_application", app_name, manifest_path, app_path)
        if self.push_creates_app:
            self.apps.setdefault(app_name, [])
        self._maybe_fail("push_application", app_name)

    def delete_application(self, app_name: str) -> None:
        self._record("delete_application", app_name)
        self._maybe_fail("delete_application", app_name)
        if app_name not in self.apps:
            raise RemoteCallError("delete", app_name, "app not found")
        del self.apps[app_name]

    def start_application(self, app_name: str) -> None:
        self._record("start_application", app_name)
        self._maybe_fail("start_application", app_name)
        self.started.append(app_name)

    def stop_application(self, app_name: str) -> None:
        self._record("stop_application", app_name)
        self._maybe_fail("stop_application", app_name)
        self.stopped.append(app_name)

    def find_routes(self, app_name: str) -> Route:
        self._record("find_routes", app_name)
        self._maybe_fail("find_routes", app_name)
        hosts = self.apps.get(app_name) or []
        if not hosts:
            raise NoRoutesError("find routes", app_name, "No routes for this app.")
        return Route(domain=self.domain, hosts=list(hosts))

    def map_routes(self, app_name: str, route: Route) -> None:
        self._record("map_routes", app_name, tuple(route.hosts))
        self._maybe_fail("map_routes", app_name)
        if route.is_empty:
            raise NoRoutesError("map routes", app_name)
        self.apps[app_name].extend(route.hosts)

    def unmap_routes(self, app_name: str, route: Route) -> None:
        self._record("unmap_routes", app_name, tuple(route.hosts))
        self._maybe_fail("unmap_routes", app_name)
        if route.is_empty:
            raise NoRoutesError("unmap routes", app_name)
        self.apps[app_name] = [host for host in self.apps[app_name] if host not in route.hosts]

    def list_applications(self) -> str:
        self._record("list_applications")
        lines = ["name   requested state   urls"]
        for name, hosts in sorted(self.apps.items()):
            lines.append(f"{name}   started   {', '.join(hosts)}")
        return "\n".join(lines)


class ScriptedCli(CFCli):
    """CFCli that returns canned output instead of running `cf`."""

    def __init__(self, responses: Optional[Dict[str, str]] = None) -> None:
        super().__init__(binary="cf")
        self.responses = responses or {}
        self.commands: List[List[str]] = []

    def run(self, args: List[str], app_name: Optional[str] = None) -> str:  # type: ignore[override]
        self.commands.append(list(args))
        if args[0] == "curl":
            return self.responses[args[1]]
        return ""
