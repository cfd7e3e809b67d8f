"""Conversions between the wire DTOs and the agent's provider/GitHub objects.

Functions taking a DTO return None (or an empty result) when the DTO is
missing instead of raising; callers that need both inputs check for None.
"""

import logging
from collections.abc import Callable

from pydantic import BaseModel, ConfigDict

from goose_connect.errors import GooseConnectError
from goose_connect.goose import GooseAgent, GooseAPIType, GooseGitHub, GooseOptions
from goose_connect.models import INT32_MAX, GitHubInfo, ProviderInfo
from goose_connect.providers.base import GitHub, Provider
from goose_connect.settings import GooseConnectSettings

logger = logging.getLogger(__name__)

DEFAULT_SESSION_ID = "remote-session"
DEFAULT_HOST = "https://github.com"


def clamp_int32(value: int) -> int:
    """Clamp a PR/issue number into the wire's int32 range; non-positive means absent (0)."""
    if value <= 0:
        return 0
    return min(value, INT32_MAX)


class StaticProvider(BaseModel, Provider):
    model_config = ConfigDict(frozen=True, protected_namespaces=())

    model_name: str = ""
    api_key: str = ""
    provider_name: str = ""
    env: dict[str, str] = {}

    def get_api_key(self) -> str:
        return self.api_key

    def get_model_name(self) -> str:
        return self.model_name

    def get_provider_name(self) -> str:
        return self.provider_name

    def get_env(self) -> dict[str, str]:
        return dict(self.env)


class StaticGitHub(BaseModel, GitHub):
    model_config = ConfigDict(frozen=True)

    api_token: str = ""
    api_url: str = ""
    repo: str = ""
    full_repo_url: str = ""
    pr_number: int = 0
    issue_number: int = 0
    branch_name: str = ""

    def get_api_token(self) -> str:
        return self.api_token

    def get_api_url(self) -> str:
        return self.api_url

    def get_repo(self) -> str:
        return self.repo

    def get_full_repo_url(self) -> str:
        return self.full_repo_url

    def get_pr_number(self) -> int:
        return self.pr_number

    def get_issue_number(self) -> int:
        return self.issue_number

    def get_branch_name(self) -> str:
        return self.branch_name


def provider_to_proto(provider: Provider | None) -> ProviderInfo | None:
    if provider is None:
        return None
    return ProviderInfo(
        model_name=provider.get_model_name(),
        api_key=provider.get_api_key(),
        provider_name=provider.get_provider_name(),
        env=provider.get_env(),
    )


def _number_or_zero(getter: Callable[[], int]) -> int:
    # A GitHub reference without a usable number is sent as 0 (absent).
    try:
        return getter()
    except (ValueError, GooseConnectError) as exc:
        logger.debug("Ignoring PR/issue number lookup failure: %s", exc)
        return 0


def github_to_proto(github: GitHub | None) -> GitHubInfo | None:
    if github is None:
        return None
    return GitHubInfo(
        api_token=github.get_api_token(),
        api_url=github.get_api_url(),
        repo=github.get_repo(),
        full_repo_url=github.get_full_repo_url(),
        pr_number=clamp_int32(_number_or_zero(github.get_pr_number)),
        issue_number=clamp_int32(_number_or_zero(github.get_issue_number)),
        branch_name=github.get_branch_name(),
    )


def create_static_provider(info: ProviderInfo | None) -> StaticProvider | None:
    if info is None:
        return None
    return StaticProvider(
        model_name=info.model_name,
        api_key=info.api_key,
        provider_name=info.provider_name,
        env=info.env,
    )


def create_static_github(info: GitHubInfo | None) -> StaticGitHub | None:
    if info is None:
        return None
    return StaticGitHub(
        api_token=info.api_token,
        api_url=info.api_url,
        repo=info.repo,
        full_repo_url=info.full_repo_url,
        pr_number=info.pr_number,
        issue_number=info.issue_number,
        branch_name=info.branch_name,
    )


def proto_to_goose_provider(info: ProviderInfo | None) -> GooseAPIType | None:
    """Map provider_name to a GooseAPIType; unknown names fall back to openai."""
    if info is None:
        return None
    try:
        return GooseAPIType(info.provider_name)
    except ValueError:
        return GooseAPIType.OPENAI


def proto_to_goose_github(info: GitHubInfo | None) -> GooseGitHub | None:
    if info is None:
        return None
    return GooseGitHub(
        installation_token=info.api_token,
        api_url=info.api_url,
        repo=info.repo,
        pr_number=info.pr_number,
        issue_number=info.issue_number,
        host=info.api_url or DEFAULT_HOST,
        branch_name=info.branch_name,
    )


def proto_to_goose_options(
    provider: ProviderInfo | None,
    github: GitHubInfo | None,
    instruction: str,
    session_id: str,
) -> GooseOptions:
    if provider is None or github is None:
        return GooseOptions()
    return GooseOptions(
        session_id=session_id or DEFAULT_SESSION_ID,
        instruction=instruction,
        provider=create_static_provider(provider),
        github=proto_to_goose_github(github),
    )


def proto_to_goose_agent(
    provider: ProviderInfo | None,
    github: GitHubInfo | None,
    instruction: str,
    session_id: str,
    settings: GooseConnectSettings,
) -> GooseAgent | None:
    """Build a GooseAgent from wire DTOs, or None when either DTO is missing."""
    if provider is None or github is None:
        return None
    options = proto_to_goose_options(provider, github, instruction, session_id)
    return GooseAgent(options, settings)
