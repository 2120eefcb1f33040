"""eUICC session context: channel management and ES10x command exchange."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field, replace
from typing import Any, TextIO

from lpakit.apdu import (
    ApduInterface,
    ApduRequest,
    ApduResponse,
    HttpInterface,
    Sw1,
    apdu_le,
    apdu_lc,
    parse_response,
)
from lpakit.logger import apdu_request_print, apdu_response_print

ISD_R_AID = bytes.fromhex("A0000005591010FFFFFFFF8900000100")
DEFAULT_ES10X_MSS = 120

_EUICC_CLA = 0x80
_EUICC_INS = 0xE2
_P1_CONTINUE = 0x11
_P1_LAST = 0x91
_GET_RESPONSE_HEADER = (0x80, 0xC0, 0x00, 0x00)


class EuiccError(Exception):
    """Raised when talking to the card fails."""


@dataclass
class HttpStatus:
    """Status of the last ES9+/ES11 exchange."""

    subject_code: str = ""
    reason_code: str = ""
    subject_identifier: str = ""
    message: str = ""

    def reset(self) -> None:
        """Set the values used before a new exchange."""
        self.reason_code = "0.0.0"
        self.subject_code = "0.0.0"
        self.subject_identifier = "unknown"
        self.message = "unknown"


@dataclass
class HttpSession:
    """Values carried between the steps of a remote provisioning session."""

    transaction_id_http: str | None = None
    transaction_id_bin: bytes | None = None
    b64_euicc_challenge: str | None = None
    b64_euicc_info_1: str | None = None
    authenticate_server_param: Any = None
    b64_authenticate_server_response: str | None = None
    prepare_download_param: Any = None
    b64_prepare_download_response: str | None = None
    b64_bound_profile_package: str | None = None
    b64_cancel_session_response: str | None = None


@dataclass
class EuiccContext:
    """Connection to one eUICC and the state of the current session."""

    apdu_interface: ApduInterface | None = None
    http_interface: HttpInterface | None = None
    aid: bytes | None = None
    es10x_mss: int = 0
    apdu_log_fp: TextIO | None = None
    http_log_fp: TextIO | None = None
    server_address: str | None = None
    http_status: HttpStatus = field(default_factory=HttpStatus)
    http_session: HttpSession = field(default_factory=HttpSession)
    userdata: Any = None
    logic_channel: int = 0

    def _apdu(self) -> ApduInterface:
        if self.apdu_interface is None:
            raise EuiccError("no APDU interface configured")
        return self.apdu_interface

    def init(self) -> None:
        """Connect to the card and open a logical channel to the ISD-R."""
        interface = self._apdu()
        if self.aid is None:
            self.aid = ISD_R_AID
        if not self.es10x_mss:
            self.es10x_mss = DEFAULT_ES10X_MSS

        try:
            interface.connect(self)
        except Exception as exc:
            raise EuiccError("connecting to the card failed") from exc

        try:
            channel = interface.logic_channel_open(self, self.aid)
        except Exception as exc:
            interface.disconnect(self)
            raise EuiccError("opening a logical channel failed") from exc
        if channel < 0:
            interface.disconnect(self)
            raise EuiccError("opening a logical channel failed")

        self.logic_channel = channel

    def fini(self) -> None:
        """Close the logical channel and disconnect."""
        interface = self._apdu()
        interface.logic_channel_close(self, self.logic_channel)
        interface.disconnect(self)
        self.logic_channel = 0

    def __enter__(self) -> EuiccContext:
        self.init()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.fini()

    def http_cleanup(self) -> None:
        """Forget everything kept from a provisioning session."""
        self.http_session = HttpSession()

    def transmit(self, request: ApduRequest) -> ApduResponse:
        """Send one APDU on the session's logical channel."""
        interface = self._apdu()
        request = replace(request, cla=(request.cla & 0xF0) | (self.logic_channel & 0x0F))
        apdu_request_print(self.apdu_log_fp, request)
        try:
            raw = interface.transmit(self, request.to_bytes())
        except Exception as exc:
            raise EuiccError("APDU transmission failed") from exc
        try:
            response = parse_response(raw)
        except ValueError as exc:
            raise EuiccError(str(exc)) from exc
        apdu_response_print(self.apdu_log_fp, response)
        return response

    def _transmit_iter(self, request: ApduRequest) -> Iterator[bytes]:
        response = self.transmit(request)
        while True:
            if response.data:
                yield response.data
            if response.sw1 == Sw1.LAST:
                response = self.transmit(apdu_le(*_GET_RESPONSE_HEADER, response.sw2))
                continue
            if response.sw1 & 0xF0 == Sw1.OK:
                return
            raise EuiccError(f"card returned status {response.sw1:02X}{response.sw2:02X}")

    def command_iter(self, der_request: bytes) -> Iterator[bytes]:
        """Send a DER request as STORE DATA segments, yielding response chunks."""
        der_request = bytes(der_request)
        mss = self.es10x_mss or DEFAULT_ES10X_MSS
        for seq, offset in enumerate(range(0, len(der_request), mss)):
            chunk = der_request[offset:offset + mss]
            p1 = _P1_LAST if offset + mss >= len(der_request) else _P1_CONTINUE
            yield from self._transmit_iter(apdu_lc(_EUICC_CLA, _EUICC_INS, p1, seq & 0xFF, chunk))

    def command(self, der_request: bytes) -> bytes:
        """Send a DER request and return the whole response."""
        return b"".join(self.command_iter(der_request))