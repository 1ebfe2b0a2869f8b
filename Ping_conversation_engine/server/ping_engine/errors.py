"""Failure taxonomy of the question engine.

All four errors are terminal for a single invocation. The service never turns
them into an empty success; callers decide whether to retry.
"""


class PingEngineError(Exception):
    status_code = 500
    stage = "engine"

    def __init__(self, message: str, *, stage: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        if stage:
            self.stage = stage


class GenerationUnavailable(PingEngineError):
    """Backend unreachable, timed out or answered with a non-2xx status."""

    status_code = 503
    stage = "backend_call"


class MalformedGenerationOutput(PingEngineError):
    """Backend answered but the body does not parse as a question set."""

    status_code = 502
    stage = "parse_output"


class ConstraintViolation(PingEngineError):
    """Schema-valid output that breaks the style diversity rules."""

    status_code = 422
    stage = "validate_diversity"


class InsufficientValidQuestions(PingEngineError):
    """Safety filtering left fewer questions than the minimum set size."""

    status_code = 422
    stage = "validate_count"
