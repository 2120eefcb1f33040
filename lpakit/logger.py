"""Debug traces of APDU and HTTP traffic."""

from __future__ import annotations

from typing import TextIO

from lpakit.apdu import ApduRequest, ApduResponse
from lpakit.hexutil import bin2hex

_COLOR_RED = "\x1b[0;31m"
_COLOR_GREEN = "\x1b[0;32m"
_COLOR_MAGENTA = "\x1b[0;35m"
_COLOR_CLEAR = "\x1b[0m"


def _isatty(fp: TextIO) -> bool:
    try:
        return bool(fp.isatty())
    except (AttributeError, ValueError, OSError):
        return False


def _emit(fp: TextIO | None, color: str, message: str) -> None:
    if fp is None:
        return
    if _isatty(fp):
        fp.write(f"{color}{message}{_COLOR_CLEAR}\n")
    else:
        fp.write(f"{message}\n")


def _text(value: str | bytes | None) -> str:
    if value is None:
        return "(null)"
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).decode("utf-8", errors="replace")
    return value


def apdu_request_print(fp: TextIO | None, request: ApduRequest) -> None:
    """Trace an outgoing APDU."""
    _emit(
        fp,
        _COLOR_GREEN,
        "[DEBUG] [APDU] [TX] "
        f"CLA: {request.cla:02X}, INS: {request.ins:02X}, P1: {request.p1:02X}, "
        f"P2: {request.p2:02X}, Lc: {request.length:02X}, Data: {bin2hex(request.data)}",
    )


def apdu_response_print(fp: TextIO | None, response: ApduResponse) -> None:
    """Trace an incoming APDU response."""
    _emit(
        fp,
        _COLOR_RED,
        "[DEBUG] [APDU] [RX] "
        f"SW1: {response.sw1:02X}, SW2: {response.sw2:02X}, Data: {bin2hex(response.data)}",
    )


def unhandled_tag_print(fp: TextIO | None, tag: int, data: bytes) -> None:
    """Trace a BER-TLV element that the decoder skipped."""
    _emit(fp, _COLOR_MAGENTA, f"[DEBUG] [APDU] [UNHANDLED BER-TLV] [TAG {tag:02X}]: {bin2hex(data)}")


def http_request_print(fp: TextIO | None, url: str, tx: str | bytes | None) -> None:
    """Trace an outgoing HTTP request."""
    _emit(fp, _COLOR_GREEN, f"[DEBUG] [HTTP] [TX] URL: {url}, Data: {_text(tx)}")


def http_response_print(fp: TextIO | None, rcode: int, rx: str | bytes | None) -> None:
    """Trace an incoming HTTP response."""
    _emit(fp, _COLOR_RED, f"[DEBUG] [HTTP] [RX] RCode: {rcode}, Data: {_text(rx)}")