"""ES9+ (LPA to SM-DP+) and ES11 (LPA to SM-DS) JSON exchanges."""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from lpakit.es9p_errors import error_message
from lpakit.euicc import EuiccContext, EuiccError, HttpStatus
from lpakit.logger import http_request_print, http_response_print

LPA_HEADERS: tuple[str, ...] = (
    "User-Agent: gsma-rsp-lpad",
    "X-Admin-Protocol: gsma/rsp/v2.2.2",
    "Content-Type: application/json",
)

_URL_PREFIX = "https://"
_API_INITIATE_AUTHENTICATION = "/gsma/rsp2/es9plus/initiateAuthentication"
_API_GET_BOUND_PROFILE_PACKAGE = "/gsma/rsp2/es9plus/getBoundProfilePackage"
_API_AUTHENTICATE_CLIENT = "/gsma/rsp2/es9plus/authenticateClient"
_API_CANCEL_SESSION = "/gsma/rsp2/es9plus/cancelSession"
_API_HANDLE_NOTIFICATION = "/gsma/rsp2/es9plus/handleNotification"

_CODE_LIMIT = 8
_TEXT_LIMIT = 128

_WHITESPACE_TABLE = str.maketrans("", "", "\n\r \t")


class Es9pError(EuiccError):
    """Raised when an exchange with the remote server fails."""


@dataclass
class AuthenticateServerParam:
    """Server data returned by initiateAuthentication, base64 encoded."""

    b64_server_signed_1: str
    b64_server_signature_1: str
    b64_euicc_ci_pkid_to_be_used: str
    b64_server_certificate: str


@dataclass
class PrepareDownloadParam:
    """Server data returned by authenticateClient, base64 encoded."""

    b64_profile_metadata: str
    b64_smdp_signed_2: str
    b64_smdp_signature_2: str
    b64_smdp_certificate: str


def _base64_trim(text: str) -> str:
    return text.translate(_WHITESPACE_TABLE)


def _set_status(
    status: HttpStatus,
    *,
    reason_code: str = "0.0.0",
    subject_code: str = "0.0.0",
    subject_identifier: str = "unknown",
    message: str = "unknown",
) -> None:
    status.reason_code = reason_code[:_CODE_LIMIT]
    status.subject_code = subject_code[:_CODE_LIMIT]
    status.subject_identifier = subject_identifier[:_TEXT_LIMIT]
    status.message = message[:_TEXT_LIMIT]


def _fail(status: HttpStatus, subject_identifier: str, message: str) -> Es9pError:
    _set_status(status, subject_identifier=subject_identifier, message=message)
    return Es9pError(message)


def _post(ctx: EuiccContext, server_address: str, api: str, body: str) -> tuple[int, bytes]:
    if ctx.http_interface is None:
        raise Es9pError("no HTTP interface configured")
    if server_address is None:
        raise Es9pError("no server address given")
    url = _URL_PREFIX + server_address + api
    http_request_print(ctx.http_log_fp, url, body)
    try:
        rcode, rx = ctx.http_interface.transmit(ctx, url, body.encode("utf-8"), LPA_HEADERS)
    except Exception as exc:
        raise Es9pError(f"HTTP transmission to {url} failed") from exc
    rx = bytes(rx)
    http_response_print(ctx.http_log_fp, rcode, rx)
    return rcode, rx


def _read_status_code_data(status: HttpStatus, status_code_data: Any) -> None:
    fields = status_code_data if isinstance(status_code_data, dict) else {}

    def text(key: str) -> str | None:
        value = fields.get(key)
        return value if isinstance(value, str) else None

    if (value := text("reasonCode")) is not None:
        status.reason_code = value[:_CODE_LIMIT]
    if (value := text("subjectCode")) is not None:
        status.subject_code = value[:_CODE_LIMIT]
    if (value := text("subjectIdentifier")) is not None:
        status.subject_identifier = value[:_TEXT_LIMIT]
    if (value := text("message")) is not None:
        status.message = value[:_TEXT_LIMIT]
        return
    known = error_message(status.subject_code, status.reason_code)
    if known is not None:
        status.message = known[:_TEXT_LIMIT]
    else:
        status.message = (
            f"subject-code: {status.subject_code}, reason-code: {status.reason_code}"
        )[:_TEXT_LIMIT]


def _trans_json(
    ctx: EuiccContext,
    server_address: str,
    api: str,
    inputs: Mapping[str, str | None],
    outputs: Sequence[str] | None,
    allow_objects: bool = False,
) -> dict[str, Any]:
    """POST ``inputs`` as JSON and return the requested output fields.

    Updates ``ctx.http_status`` on every call.
    """
    status = ctx.http_status
    status.reset()

    body = json.dumps(dict(inputs), separators=(",", ":"), ensure_ascii=False)

    try:
        rcode, rx = _post(ctx, server_address, api, body)
    except Es9pError as exc:
        _set_status(status, message="HTTP transport failed")
        raise Es9pError(status.message) from exc

    if rcode // 100 != 2:
        raise _fail(status, str(rcode), "HTTP status code error")

    if outputs is None:
        return {}

    try:
        root = json.loads(rx)
    except ValueError as exc:
        raise _fail(status, "root", "Not JSON") from exc

    if not isinstance(root, dict):
        raise _fail(status, "root", "Not Object")

    if "header" not in root:
        raise _fail(status, "header", "Critical object missing")
    header = root["header"]

    if not isinstance(header, dict) or "functionExecutionStatus" not in header:
        raise _fail(status, "functionExecutionStatus", "Critical object missing")
    execution_status = header["functionExecutionStatus"]

    if isinstance(execution_status, dict) and "statusCodeData" in execution_status:
        _read_status_code_data(status, execution_status["statusCodeData"])

    result: dict[str, Any] = {}
    for key in outputs:
        if key not in root:
            raise Es9pError(f"response lacks {key}")
        value = root[key]
        if not isinstance(value, str) and not allow_objects:
            raise Es9pError(f"response field {key} is not a string")
        result[key] = value
    return result


def initiate_authentication_r(
    ctx: EuiccContext,
    server_address: str,
    euicc_challenge: str | None,
    euicc_info_1: str | None,
) -> tuple[str, AuthenticateServerParam]:
    """Call initiateAuthentication; return the transaction id and the server data."""
    result = _trans_json(
        ctx,
        server_address,
        _API_INITIATE_AUTHENTICATION,
        {"smdpAddress": server_address, "euiccChallenge": euicc_challenge, "euiccInfo1": euicc_info_1},
        ("transactionId", "serverSigned1", "serverSignature1", "euiccCiPKIdToBeUsed", "serverCertificate"),
    )
    param = AuthenticateServerParam(
        b64_server_signed_1=_base64_trim(result["serverSigned1"]),
        b64_server_signature_1=_base64_trim(result["serverSignature1"]),
        b64_euicc_ci_pkid_to_be_used=_base64_trim(result["euiccCiPKIdToBeUsed"]),
        b64_server_certificate=_base64_trim(result["serverCertificate"]),
    )
    return result["transactionId"], param


def get_bound_profile_package_r(
    ctx: EuiccContext,
    server_address: str,
    transaction_id: str | None,
    prepare_download_response: str | None,
) -> str:
    """Call getBoundProfilePackage and return the base64 bound profile package."""
    result = _trans_json(
        ctx,
        server_address,
        _API_GET_BOUND_PROFILE_PACKAGE,
        {"transactionId": transaction_id, "prepareDownloadResponse": prepare_download_response},
        ("boundProfilePackage",),
    )
    return _base64_trim(result["boundProfilePackage"])


def authenticate_client_r(
    ctx: EuiccContext,
    server_address: str,
    transaction_id: str | None,
    authenticate_server_response: str | None,
) -> PrepareDownloadParam:
    """Call authenticateClient on an SM-DP+ and return the download parameters."""
    result = _trans_json(
        ctx,
        server_address,
        _API_AUTHENTICATE_CLIENT,
        {"transactionId": transaction_id, "authenticateServerResponse": authenticate_server_response},
        ("profileMetadata", "smdpSigned2", "smdpSignature2", "smdpCertificate"),
    )
    return PrepareDownloadParam(
        b64_profile_metadata=_base64_trim(result["profileMetadata"]),
        b64_smdp_signed_2=_base64_trim(result["smdpSigned2"]),
        b64_smdp_signature_2=_base64_trim(result["smdpSignature2"]),
        b64_smdp_certificate=_base64_trim(result["smdpCertificate"]),
    )


def cancel_session_r(
    ctx: EuiccContext,
    server_address: str,
    transaction_id: str | None,
    cancel_session_response: str | None,
) -> None:
    """Call cancelSession."""
    _trans_json(
        ctx,
        server_address,
        _API_CANCEL_SESSION,
        {"transactionId": transaction_id, "cancelSessionResponse": cancel_session_response},
        None,
    )


def es11_authenticate_client_r(
    ctx: EuiccContext,
    server_address: str,
    transaction_id: str | None,
    authenticate_server_response: str | None,
) -> list[str]:
    """Call authenticateClient on an SM-DS and return the SM-DP+ addresses of its events."""
    result = _trans_json(
        ctx,
        server_address,
        _API_AUTHENTICATE_CLIENT,
        {"transactionId": transaction_id, "authenticateServerResponse": authenticate_server_response},
        ("eventEntries",),
        allow_objects=True,
    )
    entries = result["eventEntries"]
    if not isinstance(entries, list):
        raise Es9pError("eventEntries is not an array")

    addresses = []
    for entry in entries:
        address = entry.get("rspServerAddress") if isinstance(entry, dict) else None
        if not isinstance(address, str):
            raise Es9pError("event entry lacks rspServerAddress")
        addresses.append(address)
    return addresses


def initiate_authentication(ctx: EuiccContext) -> None:
    """Run initiateAuthentication with the challenge and info kept in the session."""
    session = ctx.http_session
    if session.authenticate_server_param is not None:
        raise Es9pError("authentication already initiated")
    if session.b64_euicc_challenge is None:
        raise Es9pError("no eUICC challenge in session")
    if session.b64_euicc_info_1 is None:
        raise Es9pError("no eUICC info 1 in session")

    transaction_id, param = initiate_authentication_r(
        ctx, ctx.server_address, session.b64_euicc_challenge, session.b64_euicc_info_1
    )
    session.transaction_id_http = transaction_id
    session.authenticate_server_param = param
    session.b64_euicc_challenge = None
    session.b64_euicc_info_1 = None


def get_bound_profile_package(ctx: EuiccContext) -> None:
    """Fetch the bound profile package for the session's prepared download."""
    session = ctx.http_session
    if session.b64_bound_profile_package is not None:
        raise Es9pError("bound profile package already fetched")
    if session.b64_prepare_download_response is None:
        raise Es9pError("no prepare download response in session")

    session.b64_bound_profile_package = get_bound_profile_package_r(
        ctx, ctx.server_address, session.transaction_id_http, session.b64_prepare_download_response
    )
    session.b64_prepare_download_response = None


def authenticate_client(ctx: EuiccContext) -> None:
    """Run authenticateClient on an SM-DP+ with the session's server response."""
    session = ctx.http_session
    if session.prepare_download_param is not None:
        raise Es9pError("client already authenticated")
    if session.b64_authenticate_server_response is None:
        raise Es9pError("no authenticate server response in session")

    session.prepare_download_param = authenticate_client_r(
        ctx, ctx.server_address, session.transaction_id_http, session.b64_authenticate_server_response
    )
    session.b64_authenticate_server_response = None


def cancel_session(ctx: EuiccContext) -> None:
    """Send the session's cancel session response to the server."""
    session = ctx.http_session
    if session.b64_cancel_session_response is None:
        raise Es9pError("no cancel session response in session")

    cancel_session_r(ctx, ctx.server_address, session.transaction_id_http, session.b64_cancel_session_response)
    session.b64_cancel_session_response = None


def es11_authenticate_client(ctx: EuiccContext) -> list[str]:
    """Run authenticateClient on an SM-DS and return the discovered SM-DP+ addresses."""
    session = ctx.http_session
    if session.b64_authenticate_server_response is None:
        raise Es9pError("no authenticate server response in session")

    addresses = es11_authenticate_client_r(
        ctx, ctx.server_address, session.transaction_id_http, session.b64_authenticate_server_response
    )
    session.b64_authenticate_server_response = None
    return addresses


def handle_notification(ctx: EuiccContext, pending_notification: str | None) -> None:
    """Deliver a pending notification to ``ctx.server_address``."""
    _trans_json(
        ctx,
        ctx.server_address,
        _API_HANDLE_NOTIFICATION,
        {"pendingNotification": pending_notification},
        None,
    )