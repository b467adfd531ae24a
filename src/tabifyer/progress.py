#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/tabifyer/progress.py
"""Progress callback system for batch conversion.

Batch runs report each PDF as it is handled so that embedders (and the CLI)
can drive progress bars without parsing log output.

Examples
--------
    >>> from tabifyer import tabify_directory
    >>> from tabifyer.progress import ProgressEvent
    >>>
    >>> def on_progress(event: ProgressEvent) -> None:
    ...     print(event)
    >>>
    >>> result = tabify_directory("/data/pdfs", "/data/out", progress_callback=on_progress)

"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Literal

logger = logging.getLogger(__name__)

EventType = Literal["started", "item_done", "error", "finished"]


@dataclass
class ProgressEvent:
    """Progress event emitted during a batch run.

    Parameters
    ----------
    event_type : EventType
        - "started": the batch has begun; ``total`` is the number of PDFs.
        - "item_done": one PDF was converted; ``metadata["tsv_path"]`` and
          ``metadata["lines"]`` describe the output.
        - "error": one PDF failed; ``metadata["error"]`` holds the reason.
          The batch continues with the next file.
        - "finished": the batch is over; ``metadata["failed"]`` counts failures.
    message : str
        Human-readable description of the event
    current : int, default 0
        Number of files handled so far
    total : int, default 0
        Number of files in the batch
    metadata : dict, default empty
        Additional event-specific information

    """

    event_type: EventType
    message: str
    current: int = 0
    total: int = 0
    metadata: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        progress = f"({self.current}/{self.total})" if self.total > 0 else ""
        return f"[{self.event_type.upper()}] {self.message} {progress}".strip()


ProgressCallback = Callable[[ProgressEvent], None]


def emit_progress(callback: ProgressCallback | None, event: ProgressEvent) -> None:
    """Deliver an event to ``callback`` if one is set.

    A failing callback is logged and otherwise ignored so that a broken
    progress display cannot abort a conversion.
    """
    if callback is None:
        return
    try:
        callback(event)
    except Exception as exc:
        logger.warning("Progress callback raised %s: %s", type(exc).__name__, exc)


__all__ = ["EventType", "ProgressCallback", "ProgressEvent", "emit_progress"]
