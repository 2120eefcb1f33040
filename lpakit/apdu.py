"""APDU request/response structures and the driver interfaces."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from enum import IntEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from lpakit.euicc import EuiccContext


class Sw1(IntEnum):
    """Status word 1 values the command loop reacts to."""

    OK = 0x90
    LAST = 0x61


def _check_byte(name: str, value: int) -> None:
    if not 0 <= value <= 0xFF:
        raise ValueError(f"{name} must fit in one byte, got {value}")


@dataclass(frozen=True)
class ApduRequest:
    """A short APDU command: header, Lc/Le byte and optional body."""

    cla: int
    ins: int
    p1: int
    p2: int
    length: int
    data: bytes = b""

    def __post_init__(self) -> None:
        for name in ("cla", "ins", "p1", "p2", "length"):
            _check_byte(name, getattr(self, name))

    def to_bytes(self) -> bytes:
        """Serialise the request as sent on the wire."""
        return bytes((self.cla, self.ins, self.p1, self.p2, self.length)) + bytes(self.data)


@dataclass(frozen=True)
class ApduResponse:
    """A card response with its status word split off."""

    data: bytes
    sw1: int
    sw2: int


class ApduInterface(ABC):
    """Driver that talks to the card. Methods raise on failure."""

    @abstractmethod
    def connect(self, ctx: EuiccContext) -> None:
        """Open the connection to the card."""

    @abstractmethod
    def disconnect(self, ctx: EuiccContext) -> None:
        """Close the connection to the card."""

    @abstractmethod
    def logic_channel_open(self, ctx: EuiccContext, aid: bytes) -> int:
        """Select ``aid`` on a new logical channel and return the channel number."""

    @abstractmethod
    def logic_channel_close(self, ctx: EuiccContext, channel: int) -> None:
        """Close a logical channel."""

    @abstractmethod
    def transmit(self, ctx: EuiccContext, tx: bytes) -> bytes:
        """Send a raw APDU and return the raw response, status word included."""


class HttpInterface(ABC):
    """Driver that performs HTTP POST requests. Raises on transport failure."""

    @abstractmethod
    def transmit(
        self, ctx: EuiccContext, url: str, tx: bytes, headers: Sequence[str]
    ) -> tuple[int, bytes]:
        """POST ``tx`` to ``url`` and return the status code and body."""


def apdu_lc(cla: int, ins: int, p1: int, p2: int, data: bytes) -> ApduRequest:
    """Build a request carrying ``data`` with Lc set to its length."""
    data = bytes(data)
    if len(data) > 0xFF:
        raise ValueError(f"APDU body too long: {len(data)} bytes")
    return ApduRequest(cla, ins, p1, p2, len(data), data)


def apdu_le(cla: int, ins: int, p1: int, p2: int, expected_length: int) -> ApduRequest:
    """Build a body-less request asking for ``expected_length`` bytes."""
    return ApduRequest(cla, ins, p1, p2, expected_length)


def parse_response(raw: bytes) -> ApduResponse:
    """Split a raw card response into data and status word."""
    raw = bytes(raw)
    if len(raw) < 2:
        raise ValueError("APDU response shorter than a status word")
    return ApduResponse(raw[:-2], raw[-2], raw[-1])