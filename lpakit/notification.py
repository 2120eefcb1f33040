"""Notification records exchanged as JSON lines."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

_C_WHITESPACE = " \t\n\v\f\r"


@dataclass
class PendingNotification:
    """A pending notification and the address it is to be delivered to."""

    notification_address: str | None
    b64_pending_notification: str | None


def strstrip(text: str | None) -> str | None:
    """Strip leading and trailing ASCII whitespace; None stays None."""
    if text is None:
        return None
    return text.strip(_C_WHITESPACE)


def build_notification(eid: str, seq_number: int, notification: PendingNotification) -> dict[str, Any]:
    """Return the JSON object describing one pending notification."""
    return {
        "type": "notification",
        "eid": eid,
        "seqNumber": seq_number,
        "notificationAddress": strstrip(notification.notification_address),
        "pendingNotification": notification.b64_pending_notification,
    }


def _string_field(data: dict[str, Any], key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise ValueError(f"{key} is missing or not a string")
    return value


def parse_notification(data: Any, eid: str) -> tuple[int, PendingNotification]:
    """Read a notification object made by build_notification for ``eid``.

    Returns the sequence number and the notification; raises ValueError when
    the object is malformed or belongs to another eUICC.
    """
    if not isinstance(data, dict):
        raise ValueError("notification is not an object")

    if _string_field(data, "type") != "notification":
        raise ValueError("object is not a notification")

    if _string_field(data, "eid") != eid:
        raise ValueError("notification belongs to another eUICC")

    seq_value = data.get("seqNumber")
    if isinstance(seq_value, bool) or not isinstance(seq_value, (int, float)):
        raise ValueError("seqNumber is missing or not a number")
    seq_number = int(seq_value)

    address = strstrip(_string_field(data, "notificationAddress"))
    pending = _string_field(data, "pendingNotification")

    return seq_number, PendingNotification(address, pending)