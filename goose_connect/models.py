"""Wire DTOs for the remote agent endpoint: camelCase on the wire, snake_case in Python."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

INT32_MAX = 2**31 - 1
INT32_MIN = -(2**31)

_WIRE_CONFIG = ConfigDict(
    frozen=True,
    alias_generator=to_camel,
    populate_by_name=True,
    protected_namespaces=(),
)


class ProviderInfo(BaseModel):
    model_config = _WIRE_CONFIG

    model_name: str = ""
    api_key: str = ""
    provider_name: str = ""  # "openai" | "anthropic" | "openrouter" | "google" | "groq" | "llamaapi"
    env: dict[str, str] = {}


class GitHubInfo(BaseModel):
    model_config = _WIRE_CONFIG

    api_token: str = ""
    api_url: str = ""
    repo: str = ""  # "org/name"
    full_repo_url: str = ""
    pr_number: int = Field(0, ge=INT32_MIN, le=INT32_MAX)
    issue_number: int = Field(0, ge=INT32_MIN, le=INT32_MAX)
    branch_name: str = ""


class ExecuteTaskRequest(BaseModel):
    model_config = _WIRE_CONFIG

    provider: ProviderInfo | None = None
    github: GitHubInfo | None = None
    instruction: str = ""
    session_id: str = ""


class ExecuteTaskResponse(BaseModel):
    model_config = _WIRE_CONFIG

    output: str


class ErrorResponse(BaseModel):
    """Body returned for failed requests."""

    model_config = _WIRE_CONFIG

    code: str  # "invalid_argument" | "failed_precondition" | "internal"
    message: str
