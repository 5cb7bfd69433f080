from .logging_utils import (
    get_trace_id,
    init_logging,
    log_event,
    reset_trace_id,
    set_trace_id,
    summarize_text,
    trace_scope,
)

__all__ = [
    "get_trace_id",
    "init_logging",
    "log_event",
    "reset_trace_id",
    "set_trace_id",
    "summarize_text",
    "trace_scope",
]
