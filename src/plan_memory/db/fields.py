"""
plan_memory.db.fields

Column-level helpers shared by models and repositories.

Responsibilities:
- Generate identifiers and epoch-millisecond timestamps.
- Encode opaque structured values to text for storage and decode them on read.
"""

from __future__ import annotations

import json
import time
import uuid
from typing import Any


def new_id() -> str:
    return str(uuid.uuid4())


def now_ms() -> int:
    return time.time_ns() // 1_000_000


def encode_json(value: Any) -> str | None:
    if value is None:
        return None
    return json.dumps(value)


def decode_json(raw: str | None) -> Any:
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        # Rows written by hand (or by older tooling) may hold plain text.
        return raw


# --- Module Notes -----------------------------------------------------------
# Opaque payloads stay TEXT in the schema so it does not depend on a native JSON
# column type; callers only ever see decoded values.
