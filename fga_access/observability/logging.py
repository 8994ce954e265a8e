"""
Logging helpers for FGA_ACCESS.

Loggers here carry the store id and default model id they were bound to,
so every record from an adapter names the store it talked to, whichever
task emitted it.
"""

import logging
from typing import Any


class AuthzLoggerAdapter(logging.LoggerAdapter):
    """
    Logger adapter that stamps bound store/model ids on every record.

    Per-call ``extra`` wins over the bound values, so an operation run
    against an overridden model logs the model it actually used.
    """

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        kwargs["extra"] = {**self.extra, **(kwargs.get("extra") or {})}
        return msg, kwargs

    def bind(self, **context: Any) -> "AuthzLoggerAdapter":
        """Return a logger with ``context`` added to the bound values."""
        return AuthzLoggerAdapter(self.logger, {**self.extra, **context})


def get_logger(
    name: str,
    store_id: str | None = None,
    authorization_model_id: str | None = None,
) -> AuthzLoggerAdapter:
    """
    Get a logger bound to a store and default model.

    Args:
        name: Logger name (typically __name__)
        store_id: Store the records refer to, if known
        authorization_model_id: Default model id, if known
    """
    bound = {
        key: value
        for key, value in (
            ("store_id", store_id),
            ("authorization_model_id", authorization_model_id),
        )
        if value
    }
    return AuthzLoggerAdapter(logging.getLogger(name), bound)


def log_operation(
    logger: logging.Logger | logging.LoggerAdapter,
    operation: str,
    success: bool = True,
    duration_ms: float | None = None,
    fail_safe: str | None = None,
    level: int | None = None,
    exc_info: bool = False,
    **context: Any,
) -> None:
    """
    Log one request to the OpenFGA server.

    Successful requests log at DEBUG. A failure logs at WARNING when a
    fail-safe value replaced the result, and at ERROR when it did not.

    Args:
        logger: Logger or bound adapter
        operation: Operation name (e.g. "check")
        success: Whether the remote call succeeded
        duration_ms: Round-trip duration in milliseconds
        fail_safe: Fail-safe policy applied on failure
        level: Explicit log level, overriding the rule above
        exc_info: Attach the exception currently being handled
        **context: Request details (subject, relation, tuple_count, ...)
    """
    if level is None:
        if success:
            level = logging.DEBUG
        elif fail_safe and fail_safe != "propagate":
            level = logging.WARNING
        else:
            level = logging.ERROR

    extra: dict[str, Any] = {"operation": operation, "success": success, **context}
    if duration_ms is not None:
        extra["duration_ms"] = round(duration_ms, 2)
    if fail_safe is not None:
        extra["fail_safe"] = fail_safe

    if success:
        message = f"fga.{operation} ok"
    elif fail_safe and fail_safe != "propagate":
        message = f"fga.{operation} failed, answered with fail-safe '{fail_safe}'"
    else:
        message = f"fga.{operation} failed"
    if duration_ms is not None:
        message += f" ({duration_ms:.2f}ms)"

    logger.log(level, message, extra=extra, exc_info=exc_info)
