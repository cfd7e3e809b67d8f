"""Exception types raised across goose-connect."""


class GooseConnectError(RuntimeError):
    """Base class for every error goose-connect raises on purpose."""


class ConfigError(GooseConnectError):
    pass


class AgentBuildError(GooseConnectError):
    """Session id, token or session directory problems while building an agent."""


class EnvValidationError(AgentBuildError):
    pass


class ExecutionError(GooseConnectError):
    """The goose script could not be spawned or exited non-zero.

    ``output`` holds whatever the process printed, for logging only.
    """

    def __init__(self, message: str, output: str = "") -> None:
        super().__init__(message)
        self.output = output


class HookError(GooseConnectError):
    """A before/after task hook failed (label API error or no PR/issue number)."""


class HookAPIError(HookError):
    """The GitHub API call behind a hook failed or could not be sent."""


class EventURLError(ValueError):
    pass
