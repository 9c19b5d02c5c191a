"""Thin wrapper around the `cf` command line."""

from __future__ import annotations

import subprocess
from typing import List, Optional

from ..errors import CFCommandError
from ..utils.logging import get_logger

logger = get_logger(__name__)


class CFCli:
    """Runs `cf` subcommands and raises CFCommandError when they fail."""

    def __init__(
        self,
        binary: str = "cf",
        timeout: Optional[int] = None,
    ) -> None:
        self.binary = binary
        self.timeout = timeout

    def run(self, args: List[str], app_name: Optional[str] = None) -> str:
        command = [self.binary] + args
        logger.debug("Running %s", " ".join(command))
        try:
            process = subprocess.run(
                command,
                capture_output=True,
                text=True,
                check=False,
                timeout=self.timeout,
            )
        except FileNotFoundError as exc:
            raise CFCommandError(command, 127, str(exc), app_name=app_name) from exc
        except subprocess.TimeoutExpired as exc:
            raise CFCommandError(
                command, -1, f"timed out after {self.timeout}s", app_name=app_name
            ) from exc

        if process.stdout:
            logger.debug("%s output:\n%s", args[0], process.stdout.rstrip())
        if process.returncode != 0:
            # cf reports most failures on stdout ("FAILED" + reason)
            detail = process.stderr.strip() or process.stdout.strip()
            raise CFCommandError(command, process.returncode, detail, app_name=app_name)
        return process.stdout
