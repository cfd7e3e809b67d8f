"""HTTP endpoint that runs one goose task per request.

POST EXECUTE_TASK_PATH with an ExecuteTaskRequest (camelCase JSON). The
handler is a plain ``def`` so FastAPI runs the blocking subprocess in its
threadpool.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from goose_connect.errors import AgentBuildError, ExecutionError, GooseConnectError, HookAPIError, HookError
from goose_connect.factory import GooseAgentFactory
from goose_connect.goose import GooseAgent
from goose_connect.models import ErrorResponse, ExecuteTaskRequest, ExecuteTaskResponse

logger = logging.getLogger(__name__)

EXECUTE_TASK_PATH = "/remote.RemoteAgentService/ExecuteTask"

# First match wins, so subclasses go before their bases.
_ERROR_CODES: list[tuple[type[GooseConnectError], str, int]] = [
    (HookAPIError, "internal", 500),
    (HookError, "failed_precondition", 400),
    (AgentBuildError, "invalid_argument", 400),
    (ExecutionError, "internal", 500),
]


def _error_status(exc: GooseConnectError) -> tuple[str, int]:
    for error_type, code, status in _ERROR_CODES:
        if isinstance(exc, error_type):
            return code, status
    return "internal", 500


def build_agent(factory: GooseAgentFactory, request: ExecuteTaskRequest) -> GooseAgent:
    agent = factory.new_agent(request)
    if agent is None:
        raise AgentBuildError("provider and github info are required")
    return agent


def execute_with_hooks(
    factory: GooseAgentFactory,
    agent: GooseAgent,
    request: ExecuteTaskRequest,
    with_hooks: bool = True,
) -> str:
    """Run the before hook, execute, then run the after hook.

    The after hook also runs when execution fails; its own failure is then
    logged and the execution error is the one raised.
    """
    if with_hooks:
        factory.get_before_hook()(request)
    try:
        output = agent.execute(request.instruction)
    except GooseConnectError:
        if with_hooks:
            try:
                factory.get_after_hook()(request)
            except HookError:
                logger.exception("After hook failed for session %s", agent.get_session_id())
        raise
    if with_hooks:
        factory.get_after_hook()(request)
    return output


def run_task(factory: GooseAgentFactory, request: ExecuteTaskRequest, with_hooks: bool = True) -> str:
    return execute_with_hooks(factory, build_agent(factory, request), request, with_hooks)


def create_app(factory: GooseAgentFactory) -> FastAPI:
    app = FastAPI(title="goose-connect", version="0.1.0")

    @app.exception_handler(GooseConnectError)
    async def handle_goose_error(request: Request, exc: GooseConnectError) -> JSONResponse:
        code, status = _error_status(exc)
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        body = ErrorResponse(code=code, message=str(exc))
        return JSONResponse(body.model_dump(by_alias=True), status_code=status)

    @app.exception_handler(RequestValidationError)
    async def handle_invalid_body(request: Request, exc: RequestValidationError) -> JSONResponse:
        message = "; ".join(f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors())
        logger.error("%s %s rejected: %s", request.method, request.url.path, message)
        body = ErrorResponse(code="invalid_argument", message=message)
        return JSONResponse(body.model_dump(by_alias=True), status_code=400)

    @app.get("/healthz")
    def healthz() -> dict[str, str]:
        return {"status": "ok"}

    @app.post(EXECUTE_TASK_PATH, response_model=ExecuteTaskResponse)
    def execute_task(body: ExecuteTaskRequest) -> ExecuteTaskResponse:
        logger.info("ExecuteTask session=%s repo=%s", body.session_id, body.github.repo if body.github else "")
        return ExecuteTaskResponse(output=run_task(factory, body))

    return app
