"""
Lifecycle event model.

A LifecycleEvent is the read-only view of a core/v1 Event that the router
needs. It is built once per delivery and never mutated.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional

from .errors import EventParseError


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Normalize an API timestamp to an aware UTC datetime.

    Accepts datetimes (naive ones are taken as UTC) and ISO-8601 strings
    as found in raw watch bodies, e.g. "2024-05-01T10:00:00Z".
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError as e:
            raise EventParseError(f"invalid timestamp: {value!r}") from e
        return parse_timestamp(parsed)
    raise EventParseError(f"unsupported timestamp type: {type(value).__name__}")


def _field(obj: Any, camel: str, snake: str) -> Any:
    if obj is None:
        return None
    if isinstance(obj, dict):
        return obj.get(camel, obj.get(snake))
    return getattr(obj, snake, None)


@dataclass(frozen=True)
class LifecycleEvent:
    """
    Immutable lifecycle event.

    Fields:
        kind: Involved object kind (e.g., "Pod")
        namespace: Involved object namespace
        name: Involved object name
        uid: Involved object uid
        reason: Semantic reason (e.g., "Started", "Killing")
        type: "Normal" or "Warning"
        count: Number of times the platform observed this event
        last_timestamp: Most recent occurrence (UTC), None if unknown
    """
    kind: str
    namespace: str
    name: str
    uid: str
    reason: str
    type: str
    count: int
    last_timestamp: Optional[datetime]

    @classmethod
    def from_raw(cls, raw: Any) -> "LifecycleEvent":
        """
        Build from a raw watch body (camelCase dict) or a CoreV1Event object.

        Raises:
            EventParseError: If raw has no involved object
        """
        involved = _field(raw, "involvedObject", "involved_object")
        if involved is None:
            raise EventParseError("object has no involvedObject")

        count = _field(raw, "count", "count")
        if count is None:
            series = _field(raw, "series", "series")
            count = _field(series, "count", "count")
        if count is None:
            # events.k8s.io style single occurrence: no count, no series
            count = 1

        ts = _field(raw, "lastTimestamp", "last_timestamp")
        if ts is None:
            ts = _field(raw, "eventTime", "event_time")
        if ts is None:
            ts = _field(_field(raw, "metadata", "metadata"), "creationTimestamp", "creation_timestamp")

        try:
            count = int(count)
        except (TypeError, ValueError) as e:
            raise EventParseError(f"invalid event count: {count!r}") from e

        return cls(
            kind=_field(involved, "kind", "kind") or "",
            namespace=_field(involved, "namespace", "namespace") or "",
            name=_field(involved, "name", "name") or "",
            uid=_field(involved, "uid", "uid") or "",
            reason=_field(raw, "reason", "reason") or "",
            type=_field(raw, "type", "type") or "",
            count=count,
            last_timestamp=parse_timestamp(ts),
        )
