"""Cloud Foundry access through the `cf` CLI."""

from .models import DeploymentOptions, Route
from .repo import ApplicationRepo
from .runner import CFCli

__all__ = ["ApplicationRepo", "CFCli", "DeploymentOptions", "Route"]
