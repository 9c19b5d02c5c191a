"""Value types describing apps, routes and finalize policy."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List


@dataclass
class Route:
    """A domain plus the hostnames mapped on it, in the order the API returned them."""

    domain: str
    hosts: List[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.hosts

    def urls(self) -> List[str]:
        return [f"{host}.{self.domain}" for host in self.hosts]


@dataclass(frozen=True)
class DeploymentOptions:
    """What to do with the venerable app once the new version is live.

    keep_existing wins over unmap_routes; with neither set the venerable app
    is deleted.
    """

    keep_existing: bool = False
    unmap_routes: bool = False

    @property
    def finalize_strategy(self) -> str:
        if self.keep_existing:
            return "stop"
        if self.unmap_routes:
            return "unmap"
        return "delete"
