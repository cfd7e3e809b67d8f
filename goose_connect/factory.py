"""Agent factory plus the before/after task hooks that flag the PR or issue on GitHub."""

import logging
from collections.abc import Callable

import httpx

from goose_connect.converter import proto_to_goose_agent
from goose_connect.errors import HookAPIError, HookError
from goose_connect.goose import GooseAgent
from goose_connect.models import ExecuteTaskRequest, GitHubInfo
from goose_connect.providers.github import GitHubClient
from goose_connect.settings import GooseConnectSettings

logger = logging.getLogger(__name__)

TaskHook = Callable[[ExecuteTaskRequest], None]
ClientFactory = Callable[[str, str | None], GitHubClient]


def pr_or_issue_number(github: GitHubInfo) -> int:
    """PR number if set, else issue number; raises HookError when neither is."""
    if github.pr_number > 0:
        return github.pr_number
    if github.issue_number > 0:
        return github.issue_number
    raise HookError("no PR or issue number found")


def split_repo(repo: str) -> tuple[str, str]:
    parts = repo.split("/")
    if len(parts) != 2:
        return "", ""
    return parts[0], parts[1]


def _missing_hook(name: str) -> TaskHook:
    def hook(request: ExecuteTaskRequest) -> None:
        raise HookError(f"{name} is not set")

    return hook


class GooseAgentFactory:
    def __init__(
        self,
        settings: GooseConnectSettings,
        client_factory: ClientFactory | None = None,
    ) -> None:
        self._settings = settings
        self._client_factory = client_factory or GitHubClient
        self._before: TaskHook | None = self._add_status_label
        self._after: TaskHook | None = self._remove_status_label

    @property
    def settings(self) -> GooseConnectSettings:
        return self._settings

    def _label_target(self, request: ExecuteTaskRequest) -> tuple[GitHubClient, str, str, int]:
        github = request.github
        if github is None:
            raise HookError("github info is required to update labels")
        number = pr_or_issue_number(github)
        owner, repo = split_repo(github.repo)
        if not owner or not repo:
            raise HookError(f"invalid repository {github.repo!r}, expected org/name")
        try:
            client = self._client_factory(github.api_token, github.api_url or None)
        except RuntimeError as exc:
            raise HookError(str(exc)) from exc
        return client, owner, repo, number

    def _add_status_label(self, request: ExecuteTaskRequest) -> None:
        client, owner, repo, number = self._label_target(request)
        try:
            client.add_labels(owner, repo, number, [self._settings.label])
        except (httpx.HTTPError, RuntimeError) as exc:
            raise HookAPIError(f"failed to add label {self._settings.label!r}: {exc}") from exc

    def _remove_status_label(self, request: ExecuteTaskRequest) -> None:
        client, owner, repo, number = self._label_target(request)
        try:
            client.remove_label(owner, repo, number, self._settings.label)
        except (httpx.HTTPError, RuntimeError) as exc:
            raise HookAPIError(f"failed to remove label {self._settings.label!r}: {exc}") from exc

    def new_agent(self, request: ExecuteTaskRequest) -> GooseAgent | None:
        """Build the agent for a request; None when provider or github is missing."""
        return proto_to_goose_agent(
            request.provider,
            request.github,
            request.instruction,
            request.session_id,
            self._settings,
        )

    def get_before_hook(self) -> TaskHook:
        return self._before or _missing_hook("before hook")

    def get_after_hook(self) -> TaskHook:
        return self._after or _missing_hook("after hook")

    def set_before_hook(self, hook: TaskHook | None) -> None:
        self._before = hook

    def set_after_hook(self, hook: TaskHook | None) -> None:
        self._after = hook
