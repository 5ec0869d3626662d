"""Environment helpers shared by the address package."""

from __future__ import annotations

import logging
from collections import Counter
from pathlib import Path
from typing import Iterable

from dotenv import load_dotenv

logger = logging.getLogger(__name__)
_CHECKED_ENV_PATHS: set[Path] = set()


def _warn_duplicate_keys(path: Path) -> None:
    """Log duplicate keys found in the provided ``.env`` file."""

    try:
        resolved = path.resolve()
    except OSError:
        resolved = path
    if resolved in _CHECKED_ENV_PATHS:
        return
    _CHECKED_ENV_PATHS.add(resolved)
    if not path.exists():
        return
    keys: list[str] = []
    with path.open("r", encoding="utf-8") as fh:
        for raw_line in fh:
            line = raw_line.strip()
            if not line or line.startswith("#"):
                continue
            if line.lower().startswith("export "):
                line = line[7:].lstrip()
            key, sep, _ = line.partition("=")
            key = key.strip()
            if sep and key:
                keys.append(key)
    for dup in (key for key, count in Counter(keys).items() if count > 1):
        logger.warning("Duplicate .env key: %s (using last)", dup)


def _warn_duplicates(paths: Iterable[Path]) -> None:
    for candidate in paths:
        try:
            _warn_duplicate_keys(candidate)
        except OSError:
            logger.debug("duplicate .env check failed for %s", candidate, exc_info=True)


def load_env(script_dir: Path | None = None) -> None:
    """Load ``MAILADDR_*`` settings from ``.env`` files.

    ``script_dir/.env`` is read first, then ``.env`` in the working
    directory. Values already present in the environment win.
    """

    candidates: list[Path] = []
    if script_dir is not None:
        candidates.append(Path(script_dir) / ".env")
    candidates.append(Path(".env"))
    for candidate in candidates:
        load_dotenv(dotenv_path=candidate)
    _warn_duplicates(candidates)


__all__ = ["load_env"]
