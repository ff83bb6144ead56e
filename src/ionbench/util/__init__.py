from __future__ import annotations

from ionbench.util.core import ReadableException
from ionbench.util.logging import log_structured_event, new_job_id

__all__ = [
    "ReadableException",
    "new_job_id",
    "log_structured_event",
]
