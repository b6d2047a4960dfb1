from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)
_warned_keys: set[str] = set()


def warn_once(key: str, message: str) -> None:
    """Log a warning the first time ``key`` is seen in this process."""
    if key not in _warned_keys:
        logger.warning(message)
        _warned_keys.add(key)


def ensure_output_dir(path: Path) -> None:
    """Ensure parent directory exists for output path."""
    path.parent.mkdir(parents=True, exist_ok=True)


__all__ = ["ensure_output_dir", "warn_once"]
