"""
Serialization at the store boundary.

SQLite has no JSON, boolean or timestamp column types, so structured values
are written as text and converted back when a row is read:

  list / dict   → JSON text           (malformed → [] / {})
  datetime      → ISO-8601, UTC       (unparseable → None)
  date          → YYYY-MM-DD          (unparseable → None)
  bool          → 0 / 1

Deserializers never raise: downstream code always receives a usable value.
"""
from __future__ import annotations

import json
from datetime import date, datetime, timezone
from typing import Any, Optional

import structlog

logger = structlog.get_logger()


# ═══════════════════════════════════════════════════════════════
# JSON
# ═══════════════════════════════════════════════════════════════

def _safe_loads(text: Optional[str]) -> Any:
    if text is None or text == "":
        return None
    try:
        return json.loads(text)
    except (TypeError, ValueError) as e:
        logger.warning("json_parse_failed", error=str(e), sample=str(text)[:80])
        return None


def serialize_array(values: Optional[list]) -> str:
    return json.dumps(list(values or []), default=_json_default)


def deserialize_array(text: Optional[str]) -> list:
    parsed = _safe_loads(text)
    return parsed if isinstance(parsed, list) else []


def serialize_object(values: Optional[dict]) -> str:
    return json.dumps(dict(values or {}), default=_json_default)


def deserialize_object(text: Optional[str]) -> dict:
    parsed = _safe_loads(text)
    return parsed if isinstance(parsed, dict) else {}


def _json_default(value: Any) -> Any:
    # audit snapshots carry datetimes and enums from model_dump()
    if isinstance(value, datetime):
        return serialize_datetime(value)
    if isinstance(value, date):
        return value.isoformat()
    if hasattr(value, "value"):
        return value.value
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


# ═══════════════════════════════════════════════════════════════
# Timestamps
# ═══════════════════════════════════════════════════════════════

def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def serialize_datetime(value: Optional[datetime]) -> Optional[str]:
    """Naive datetimes are taken to be UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat()


def deserialize_datetime(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        try:
            # SQLite CURRENT_TIMESTAMP is "YYYY-MM-DD HH:MM:SS"; fromisoformat accepts it
            parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
        except ValueError:
            logger.warning("timestamp_parse_failed", value=str(value)[:40])
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def serialize_date(value: Optional[date]) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, datetime):
        value = value.date()
    return value.isoformat()


def deserialize_date(value: Any) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        logger.warning("date_parse_failed", value=str(value)[:40])
        return None


# ═══════════════════════════════════════════════════════════════
# Booleans
# ═══════════════════════════════════════════════════════════════

def serialize_bool(value: Optional[bool]) -> int:
    return 1 if value else 0


def deserialize_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "t", "yes")
    return bool(value)
