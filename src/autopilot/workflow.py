"""High-level workflow orchestration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from .cf import ApplicationRepo, CFCli
from .config import AppConfig
from .plans import (
    ReplaceRequest,
    build_push_actions,
    build_rollback_actions,
    validate_rollback,
)
from .rewind import ActionStep, SagaExecutor
from .utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class WorkflowResult:
    """What a successful workflow reports back to the CLI."""

    success_message: str
    app_listing: str


def create_repo(config: AppConfig) -> ApplicationRepo:
    cli = CFCli(binary=config.cf.binary, timeout=config.cf.command_timeout)
    return ApplicationRepo(cli, config.cf)


class AutopilotWorkflow:
    """Validates a request, builds its plan and runs it with rollback-on-failure."""

    def __init__(self, config: AppConfig, repo: Optional[ApplicationRepo] = None) -> None:
        self.config = config
        self.repo = repo or create_repo(config)

    def run_replace(self, request: ReplaceRequest) -> WorkflowResult:
        logger.info("Preparing zero-downtime push of %s", request.app_name)
        actions = build_push_actions(self.repo, request)
        return self._execute(actions, self.config.messages.push_success)

    def run_rollback(self, app_name: str) -> WorkflowResult:
        logger.info("Preparing rollback of %s", app_name)
        validate_rollback(self.repo, app_name)
        actions = build_rollback_actions(self.repo, app_name)
        return self._execute(actions, self.config.messages.rollback_success)

    def _execute(self, actions: List[ActionStep], success_message: str) -> WorkflowResult:
        SagaExecutor(actions, self.config.messages.fallback_message).execute()
        listing = self.repo.list_applications()
        return WorkflowResult(success_message=success_message, app_listing=listing)
