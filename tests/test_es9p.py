import io
import json

import pytest

from lpakit.apdu import HttpInterface
from lpakit.es9p import (
    LPA_HEADERS,
    AuthenticateServerParam,
    Es9pError,
    PrepareDownloadParam,
    authenticate_client,
    authenticate_client_r,
    cancel_session,
    cancel_session_r,
    es11_authenticate_client,
    es11_authenticate_client_r,
    get_bound_profile_package,
    get_bound_profile_package_r,
    handle_notification,
    initiate_authentication,
    initiate_authentication_r,
)
from lpakit.euicc import EuiccContext

SERVER = "smdp.example.com"
HEADER = {"header": {"functionExecutionStatus": {"status": "Executed-Success"}}}


class FakeHttp(HttpInterface):
    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def transmit(self, ctx, url, tx, headers):
        self.calls.append((url, json.loads(tx), list(headers)))
        return self.responses.pop(0)


class BrokenHttp(HttpInterface):
    def transmit(self, ctx, url, tx, headers):
        raise ConnectionError("down")


def reply(body, code=200):
    if isinstance(body, dict):
        body = json.dumps(body)
    return code, body.encode()


def ok(**fields):
    return reply({**HEADER, **fields})


def make_ctx(*responses):
    http = FakeHttp(*responses)
    return EuiccContext(http_interface=http, server_address=SERVER), http


AUTH_FIELDS = {
    "transactionId": "TX1",
    "serverSigned1": "AA\nBB",
    "serverSignature1": " CC\r\n",
    "euiccCiPKIdToBeUsed": "DD\tEE",
    "serverCertificate": "FF",
}


def test_initiate_authentication_r_request_and_trim():
    ctx, http = make_ctx(ok(**AUTH_FIELDS))
    transaction_id, param = initiate_authentication_r(ctx, SERVER, "chal", "info")
    assert transaction_id == "TX1"
    assert param == AuthenticateServerParam("AABB", "CC", "DDEE", "FF")
    url, body, headers = http.calls[0]
    assert url == "https://smdp.example.com/gsma/rsp2/es9plus/initiateAuthentication"
    assert body == {"smdpAddress": SERVER, "euiccChallenge": "chal", "euiccInfo1": "info"}
    assert headers == list(LPA_HEADERS)
    assert headers[1] == "X-Admin-Protocol: gsma/rsp/v2.2.2"


def test_none_input_sent_as_null():
    ctx, http = make_ctx(ok(boundProfilePackage="BPP"))
    get_bound_profile_package_r(ctx, SERVER, None, "resp")
    assert http.calls[0][1] == {"transactionId": None, "prepareDownloadResponse": "resp"}


def test_http_status_error():
    ctx, _ = make_ctx(reply("nope", code=404))
    with pytest.raises(Es9pError):
        cancel_session_r(ctx, SERVER, "TX", "resp")
    assert ctx.http_status.subject_identifier == "404"
    assert ctx.http_status.message == "HTTP status code error"
    assert ctx.http_status.reason_code == "0.0.0"


def test_transport_failure():
    ctx = EuiccContext(http_interface=BrokenHttp(), server_address=SERVER)
    with pytest.raises(Es9pError):
        handle_notification(ctx, "notif")
    assert ctx.http_status.message == "HTTP transport failed"
    assert ctx.http_status.subject_identifier == "unknown"


def test_missing_interface_is_transport_failure():
    ctx = EuiccContext(server_address=SERVER)
    with pytest.raises(Es9pError):
        handle_notification(ctx, "notif")
    assert ctx.http_status.message == "HTTP transport failed"


@pytest.mark.parametrize(
    "body, identifier, message",
    [
        ("not json", "root", "Not JSON"),
        ("[1, 2]", "root", "Not Object"),
        ({"transactionId": "x"}, "header", "Critical object missing"),
        ({"header": {}}, "functionExecutionStatus", "Critical object missing"),
    ],
)
def test_response_structure_errors(body, identifier, message):
    ctx, _ = make_ctx(reply(body))
    with pytest.raises(Es9pError):
        get_bound_profile_package_r(ctx, SERVER, "TX", "resp")
    assert ctx.http_status.subject_identifier == identifier
    assert ctx.http_status.message == message


def failed(status_code_data):
    return {"header": {"functionExecutionStatus": {"status": "Failed", "statusCodeData": status_code_data}}}


def test_status_code_data_known_message():
    ctx, _ = make_ctx(reply(failed({"subjectCode": "8.2.6", "reasonCode": "3.8", "subjectIdentifier": "x"})))
    with pytest.raises(Es9pError):
        get_bound_profile_package_r(ctx, SERVER, "TX", "resp")
    assert ctx.http_status.subject_code == "8.2.6"
    assert ctx.http_status.reason_code == "3.8"
    assert ctx.http_status.subject_identifier == "x"
    assert ctx.http_status.message == "MatchingID (AC_Token or EventID) is refused"


def test_status_code_data_unknown_message():
    ctx, _ = make_ctx(reply(failed({"subjectCode": "1.2", "reasonCode": "3.4"})))
    with pytest.raises(Es9pError):
        get_bound_profile_package_r(ctx, SERVER, "TX", "resp")
    assert ctx.http_status.message == "subject-code: 1.2, reason-code: 3.4"


def test_status_code_data_explicit_message():
    ctx, _ = make_ctx(reply(failed({"subjectCode": "8.2.6", "reasonCode": "3.8", "message": "custom"})))
    with pytest.raises(Es9pError):
        get_bound_profile_package_r(ctx, SERVER, "TX", "resp")
    assert ctx.http_status.message == "custom"


def test_output_must_be_string():
    ctx, _ = make_ctx(ok(boundProfilePackage={"a": 1}))
    with pytest.raises(Es9pError):
        get_bound_profile_package_r(ctx, SERVER, "TX", "resp")


def test_bound_profile_package_trimmed():
    ctx, http = make_ctx(ok(boundProfilePackage="AB\nCD "))
    assert get_bound_profile_package_r(ctx, SERVER, "TX", "resp") == "ABCD"
    assert http.calls[0][0].endswith("/gsma/rsp2/es9plus/getBoundProfilePackage")


def test_authenticate_client_r():
    fields = {"profileMetadata": "M\n", "smdpSigned2": "S2", "smdpSignature2": "G 2", "smdpCertificate": "C"}
    ctx, http = make_ctx(ok(**fields))
    param = authenticate_client_r(ctx, SERVER, "TX", "asr")
    assert param == PrepareDownloadParam("M", "S2", "G2", "C")
    assert http.calls[0][1] == {"transactionId": "TX", "authenticateServerResponse": "asr"}


def test_authenticate_client_r_missing_field():
    ctx, _ = make_ctx(ok(profileMetadata="M", smdpSigned2="S2", smdpSignature2="G2"))
    with pytest.raises(Es9pError):
        authenticate_client_r(ctx, SERVER, "TX", "asr")


def test_es11_authenticate_client_r():
    entries = [{"rspServerAddress": "a.example.com"}, {"rspServerAddress": "b.example.com", "eventId": "e"}]
    ctx, http = make_ctx(ok(eventEntries=entries))
    assert es11_authenticate_client_r(ctx, SERVER, "TX", "asr") == ["a.example.com", "b.example.com"]
    assert http.calls[0][0].endswith("/gsma/rsp2/es9plus/authenticateClient")


@pytest.mark.parametrize("entries", [{"a": 1}, [{"eventId": "e"}], [{"rspServerAddress": 5}], ["x"]])
def test_es11_authenticate_client_r_bad_entries(entries):
    ctx, _ = make_ctx(ok(eventEntries=entries))
    with pytest.raises(Es9pError):
        es11_authenticate_client_r(ctx, SERVER, "TX", "asr")


def test_initiate_authentication_updates_session():
    ctx, _ = make_ctx(ok(**AUTH_FIELDS))
    ctx.http_session.b64_euicc_challenge = "chal"
    ctx.http_session.b64_euicc_info_1 = "info"
    initiate_authentication(ctx)
    session = ctx.http_session
    assert session.transaction_id_http == "TX1"
    assert session.authenticate_server_param.b64_server_signed_1 == "AABB"
    assert session.b64_euicc_challenge is None
    assert session.b64_euicc_info_1 is None


def test_initiate_authentication_preconditions():
    ctx, http = make_ctx()
    with pytest.raises(Es9pError):
        initiate_authentication(ctx)
    ctx.http_session.b64_euicc_challenge = "chal"
    with pytest.raises(Es9pError):
        initiate_authentication(ctx)
    assert http.calls == []


def test_initiate_authentication_failure_keeps_inputs():
    ctx, _ = make_ctx(reply("x", code=500))
    ctx.http_session.b64_euicc_challenge = "chal"
    ctx.http_session.b64_euicc_info_1 = "info"
    with pytest.raises(Es9pError):
        initiate_authentication(ctx)
    assert ctx.http_session.authenticate_server_param is None
    assert ctx.http_session.b64_euicc_challenge == "chal"


def test_get_bound_profile_package_session():
    ctx, http = make_ctx(ok(boundProfilePackage="BPP"))
    ctx.http_session.transaction_id_http = "TX"
    ctx.http_session.b64_prepare_download_response = "pdr"
    get_bound_profile_package(ctx)
    assert ctx.http_session.b64_bound_profile_package == "BPP"
    assert ctx.http_session.b64_prepare_download_response is None
    assert http.calls[0][1] == {"transactionId": "TX", "prepareDownloadResponse": "pdr"}
    with pytest.raises(Es9pError):
        get_bound_profile_package(ctx)


def test_authenticate_client_session():
    fields = {"profileMetadata": "M", "smdpSigned2": "S2", "smdpSignature2": "G2", "smdpCertificate": "C"}
    ctx, _ = make_ctx(ok(**fields))
    with pytest.raises(Es9pError):
        authenticate_client(ctx)
    ctx.http_session.b64_authenticate_server_response = "asr"
    authenticate_client(ctx)
    assert ctx.http_session.prepare_download_param.b64_smdp_certificate == "C"
    assert ctx.http_session.b64_authenticate_server_response is None


def test_cancel_session_session():
    ctx, http = make_ctx(reply(""))
    with pytest.raises(Es9pError):
        cancel_session(ctx)
    ctx.http_session.b64_cancel_session_response = "csr"
    cancel_session(ctx)
    assert ctx.http_session.b64_cancel_session_response is None
    assert http.calls[0][0].endswith("/gsma/rsp2/es9plus/cancelSession")


def test_es11_authenticate_client_session():
    ctx, _ = make_ctx(ok(eventEntries=[{"rspServerAddress": "a.example.com"}]))
    ctx.http_session.b64_authenticate_server_response = "asr"
    assert es11_authenticate_client(ctx) == ["a.example.com"]
    assert ctx.http_session.b64_authenticate_server_response is None


def test_handle_notification_payload_and_log():
    ctx, http = make_ctx(reply(""))
    log = io.StringIO()
    ctx.http_log_fp = log
    handle_notification(ctx, "notif")
    url, body, _ = http.calls[0]
    assert url == "https://smdp.example.com/gsma/rsp2/es9plus/handleNotification"
    assert body == {"pendingNotification": "notif"}
    lines = log.getvalue().splitlines()
    assert lines[0].startswith("[DEBUG] [HTTP] [TX] URL: https://smdp.example.com")
    assert lines[1].startswith("[DEBUG] [HTTP] [RX] RCode: 200")