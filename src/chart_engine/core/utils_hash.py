"""Content fingerprints for render records and the thumbnail cache."""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any

from chart_engine.core.errors import DataSourceError

_READ_CHUNK = 1 << 20


def sha256_text(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def sha256_payload(payload: Any) -> str:
    """
    Hash a JSON-serialisable payload independent of key order.

    Two configurations that differ only in dict ordering hash the same.
    """
    canonical = json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return sha256_text(canonical)


def sha256_file(path: str | Path) -> str:
    """Hash the source file a CLI render read its rows from."""
    p = Path(path)
    if not p.is_file():
        raise DataSourceError(f"Cannot hash missing file: {path}")

    digest = hashlib.sha256()
    with p.open("rb") as f:
        for block in iter(lambda: f.read(_READ_CHUNK), b""):
            digest.update(block)
    return digest.hexdigest()
