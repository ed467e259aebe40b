from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Route package logs to stderr. Safe to call more than once."""
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    root = logging.getLogger("ol_doc_pipeline_core")
    root.setLevel(numeric_level)
    if not any(getattr(h, "_ol_doc_pipeline", False) for h in root.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._ol_doc_pipeline = True  # type: ignore[attr-defined]
        root.addHandler(handler)
