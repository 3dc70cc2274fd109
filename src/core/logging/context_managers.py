"""Context managers for structured logging."""

from typing import Dict, Optional

from core.logging.context import get_log_context, set_log_context


class LogContext:
    """
    Context manager for temporary log context.

    Usage:
        with LogContext(stage="decode", topic="clicks"):
            # All logs in this block will have stage and topic
            do_work()
    """

    def __init__(
        self,
        stage: Optional[str] = None,
        worker_id: Optional[str] = None,
        topic: Optional[str] = None,
    ):
        self.new_context = {
            "stage": stage,
            "worker_id": worker_id,
            "topic": topic,
        }
        self.old_context: Dict[str, str] = {}

    def __enter__(self) -> "LogContext":
        self.old_context = get_log_context()
        for key, value in self.new_context.items():
            if value is not None:
                set_log_context(**{key: value})
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        # Restore old context
        set_log_context(
            stage=self.old_context.get("stage", ""),
            worker_id=self.old_context.get("worker_id", ""),
            topic=self.old_context.get("topic", ""),
        )
        return False
