"""Exception hierarchy shared across autopilot."""

from __future__ import annotations

from typing import List, Optional


class AutopilotError(RuntimeError):
    """Base class for every error autopilot reports to the user."""


class ValidationError(AutopilotError):
    """Raised before any remote call when the request cannot proceed."""


MISSING_MANIFEST_MESSAGE = "a manifest is required to push this application"


class MissingManifestError(ValidationError):
    """Raised when deploy-replace is invoked without `-f`."""

    def __init__(self) -> None:
        super().__init__(MISSING_MANIFEST_MESSAGE)


class RemoteCallError(AutopilotError):
    """Raised when an operation against the platform fails."""

    def __init__(self, operation: str, app_name: Optional[str], reason: str) -> None:
        self.operation = operation
        self.app_name = app_name
        self.reason = reason
        target = f" for app \"{app_name}\"" if app_name else ""
        super().__init__(f"{operation}{target} failed: {reason}")


class CFCommandError(RemoteCallError):
    """Raised when a `cf` CLI command exits unsuccessfully."""

    def __init__(
        self,
        command: List[str],
        exit_code: int,
        stderr: str,
        app_name: Optional[str] = None,
    ) -> None:
        self.command = command
        self.exit_code = exit_code
        self.stderr = stderr
        super().__init__(
            " ".join(command),
            app_name,
            f"exit code {exit_code}" + (f": {stderr}" if stderr else ""),
        )


class NoRoutesError(RemoteCallError):
    """Raised when a route operation has no hosts to work with."""

    def __init__(self, operation: str, app_name: Optional[str], reason: str = "no routes") -> None:
        super().__init__(operation, app_name, reason)


class ConfigError(ValidationError):
    """Raised when the configuration file or environment cannot be loaded."""
