"""Foundation utilities module for mdbx-sourcery.

Provides reusable primitives for hashing, atomic file output, JSON output and
logging. As a Layer 0 foundation module, this package must not import any
other project packages.

Key Functions:
--------------
- compute_hash: Deterministic SHA256 of strings and canonicalized dicts
- file_hash: Chunked content hash of a file
- write_text_atomic: Replace a file in one step (no partial output)
- write_json: Atomic JSON persistence with formatting
- configure_logger: Human-readable or JSON-line log formatting

Example:
--------
>>> from mdbx_sourcery.utils import compute_hash
>>> compute_hash({"describe": "v0.14.1-95-g924581bd"})  # stable across runs
"""

from __future__ import annotations

import hashlib
import json
import logging
import os
from pathlib import Path
import tempfile
from typing import Any

__all__ = [
    "compute_hash",
    "file_hash",
    "write_text_atomic",
    "write_json",
    "configure_logger",
]


# ============================================================================
# Hashing
# ============================================================================


def compute_hash(data: str | dict[str, Any]) -> str:
    """Compute deterministic SHA256 hash of input data.

    For dictionaries, canonicalizes by sorting keys before hashing.

    Args:
        data: String or dictionary to hash

    Returns:
        SHA256 hex digest (64 characters)
    """
    if isinstance(data, dict):
        # Canonicalize: sort keys and convert to compact JSON
        canonical = json.dumps(data, sort_keys=True, separators=(",", ":"))
        data_bytes = canonical.encode("utf-8")
    else:
        data_bytes = data.encode("utf-8")

    return hashlib.sha256(data_bytes).hexdigest()


def file_hash(
    path: Path | str,
    algorithm: str = "sha256",
    chunk_size: int = 8192,
) -> str:
    """Compute content hash of file.

    Args:
        path: File to hash
        algorithm: Hash algorithm (default: sha256)
        chunk_size: Read chunk size in bytes

    Returns:
        Hexadecimal hash digest

    Raises:
        FileNotFoundError: If file does not exist
        ValueError: If algorithm not supported
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    try:
        hasher = hashlib.new(algorithm)
    except ValueError as e:
        raise ValueError(f"Unsupported hash algorithm: {algorithm}") from e

    with open(path, "rb") as f:
        while chunk := f.read(chunk_size):
            hasher.update(chunk)

    return hasher.hexdigest()


# ============================================================================
# File Output
# ============================================================================


def write_text_atomic(path: Path | str, text: str) -> Path:
    """Write text to a file so readers see either the old or the new content.

    The content goes to a temporary file in the target directory which then
    replaces the target. If anything fails before the replace, the target is
    left untouched and the temporary file is removed.

    Args:
        path: Target file path
        text: Content to write (UTF-8)

    Returns:
        The target path
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
            f.write(text)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise

    return path


def write_json(data: dict[str, Any], path: Path | str, indent: int = 2) -> Path:
    """Write dictionary to JSON file atomically.

    Args:
        data: Dictionary to serialize
        path: Output file path
        indent: JSON indentation (default: 2 spaces)

    Returns:
        The target path
    """
    text = json.dumps(data, indent=indent, ensure_ascii=False) + "\n"
    return write_text_atomic(path, text)


# ============================================================================
# Logging Configuration
# ============================================================================


class JSONLineFormatter(logging.Formatter):
    """One JSON object per record; the message is escaped by json.dumps."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, separators=(",", ":"), ensure_ascii=False)


def configure_logger(name: str, level: str = "INFO", structured: bool = False) -> logging.Logger:
    """Configure logger with specified settings.

    Args:
        name: Logger name
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        structured: If True, use structured (JSON) logging

    Returns:
        Configured logger instance

    Raises:
        ValueError: If level is not a known logging level
    """
    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {level}")

    logger = logging.getLogger(name)
    logger.setLevel(numeric_level)

    # Remove existing handlers
    logger.handlers.clear()

    handler = logging.StreamHandler()

    if structured:
        formatter = JSONLineFormatter()
    else:
        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

    handler.setFormatter(formatter)
    logger.addHandler(handler)

    return logger
