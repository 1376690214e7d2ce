"""
Application errors for clean API error handling.

Every error carries a caller-safe message and the HTTP status the API layer
should answer with. Services raise these; app/api/handlers.py maps them to
{"error": message} responses.
"""


class AppError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class InputError(AppError):
    """Raised when a required request field is missing or blank."""

    status_code = 400


class UpstreamProtocolError(AppError):
    """The model did not follow the required structured contract."""


class SchemaNotInvokedError(UpstreamProtocolError):
    """The model answered without calling the forced planning schema."""


class MalformedArgumentsError(UpstreamProtocolError):
    """Schema or tool arguments could not be parsed or lack required fields."""


class UpstreamContentError(AppError):
    """The model returned empty content where content was required."""


class EmptyStepResultError(UpstreamContentError):
    def __init__(self, step_name: str) -> None:
        self.step_name = step_name
        super().__init__(f'Execution of step "{step_name}" failed to produce content.')


class EmptySummaryError(UpstreamContentError):
    def __init__(self) -> None:
        super().__init__("Summary generation produced no content.")


class SummaryError(AppError):
    """Summarization could not be attempted or was rejected by the provider."""


class ContextTooLargeError(SummaryError):
    def __init__(self, context_len: int | None = None) -> None:
        self.context_len = context_len
        detail = f" ({context_len} chars)" if context_len is not None else ""
        super().__init__(f"Execution context is too large to summarize{detail}.")


class ToolExecutionError(AppError):
    """A tool call could not be dispatched."""


class UnknownToolError(ToolExecutionError):
    def __init__(self, tool_name: str) -> None:
        self.tool_name = tool_name
        super().__init__(f"Unknown tool requested: {tool_name!r}")


class LoopExceededError(AppError):
    """The tool loop did not reach a final answer within the allowed turns."""

    def __init__(self, max_rounds: int) -> None:
        self.max_rounds = max_rounds
        super().__init__(f"Tool loop exceeded {max_rounds} model turns without a final answer.")


class ServiceUnavailableError(AppError):
    """Raised when a required service (e.g. vector store, LLM API) is unavailable or misconfigured."""

    status_code = 503
