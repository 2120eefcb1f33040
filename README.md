# lpakit

Building blocks for a local profile assistant (LPA) that talks to an eUICC
(embedded SIM) and to SM-DP+ / SM-DS servers.

## Modules

- `lpakit.hexutil`: `bin2hex`, `hex2bin`, and the GSM BCD (swapped-nibble)
  helpers `gsmbcd2bin` and `bin2gsmbcd`.
- `lpakit.sha256`: an incremental SHA-256 hasher (`Sha256` with `update`,
  `digest`, `hexdigest`) and a one-shot `sha256(data)`.
- `lpakit.es9p_errors`: `error_message(subject_code, reason_code)` returns
  the description of an ES9+ / ES11 status code pair, or `None`.
- `lpakit.tostr`: the enums `ProfileState`, `ProfileClass`, `IconType`,
  `ProfileManagementOperation`, `BppCommandId` and `ErrorReason`, plus
  `*_to_str` functions that give their text forms. `NULL` values map to
  `None`, `UNDEFINED` to `"unknown"`, and anything else to
  `"(no_str_available)"`.
- `lpakit.apdu`: `ApduRequest` / `ApduResponse`, the builders `apdu_lc`,
  `apdu_le` and `parse_response`, and the abstract transports
  `ApduInterface` and `HttpInterface`.
- `lpakit.logger`: one-line debug traces of APDU and HTTP traffic, coloured
  when written to a terminal.
- `lpakit.euicc`: `EuiccContext`. `init()` connects and opens a logical
  channel to the ISD-R (default AID `A0000005591010FFFFFFFF8900000100`,
  default segment size 120), `fini()` closes it, and the context can be
  used in a `with` block. `command(der)` / `command_iter(der)` send a DER
  request as STORE DATA segments and collect `61xx` continuation
  responses. Failures raise `EuiccError`.
- `lpakit.es9p`: the ES9+ / ES11 JSON exchanges `initiate_authentication`,
  `authenticate_client`, `get_bound_profile_package`, `cancel_session`,
  `es11_authenticate_client` and `handle_notification`, each with a `*_r`
  variant that takes its values as arguments. Failures raise `Es9pError`.
  The server's status of the last exchange is kept in `ctx.http_status`,
  and session values between steps in `ctx.http_session`.
- `lpakit.notification`: `PendingNotification`, `strstrip`, and
  `build_notification` / `parse_notification` for notification records.
- `lpakit.jprint`: `jprint_success`, `jprint_error`, `jprint_progress` and
  `jprint_progress_obj`, which write the one-line JSON messages.
- `lpakit.applet`: `Applet` and `applet_entry` for sub-command dispatch.
- `lpakit.cli`: the command line and the environment settings.

## Installation

```
pip install lpakit
```

## Command line

```
lpakit version
```

prints the version as a JSON success message:

```
{"type":"lpa","payload":{"code":0,"message":"success","data":"2.3.0"}}
```

Running `lpakit` with no or an unknown sub-command prints a usage line.

## Library example

```python
from lpakit.hexutil import bin2gsmbcd, gsmbcd2bin
from lpakit.es9p_errors import error_message

gsmbcd2bin("8944", 10)   # b"\x98\x44" padded with 0xff to 10 bytes
bin2gsmbcd(b"\x98\x44")  # "8944"
error_message("8.2.6", "3.8")
# 'MatchingID (AC_Token or EventID) is refused'
```

To drive a chip, subclass `lpakit.apdu.ApduInterface` with your card
reader's connect / logical-channel / transmit calls and
`lpakit.apdu.HttpInterface` with an HTTPS POST, then give both to an
`lpakit.euicc.EuiccContext`.

## Environment

`lpakit.cli` reads these settings:

- `setup_isdr_aid()`: `LPAC_CUSTOM_ISD_R_AID`, a hex ISD-R AID of 1 to 16
  bytes.
- `setup_es10x_mss()`: `LPAC_CUSTOM_ES10X_MSS`, a segment size from 6 to
  255 (0 or unset means the default).
- `setup_logger()`: `LPAC_APDU_DEBUG` / `LPAC_HTTP_DEBUG` (or the older
  `LIBEUICC_DEBUG_APDU` / `LIBEUICC_DEBUG_HTTP`) turn on tracing to
  standard error.

Invalid values raise `ConfigError`.

## What it does not do

- It ships no card-reader or HTTP drivers; you provide the `ApduInterface`
  and `HttpInterface` implementations.
- It does not encode or decode the ES10a/b/c card commands (EID, profile
  list, enable/disable/delete, notification list, profile download steps),
  so the command line has only the `version` command: no chip, profile or
  notification commands.

## Tests

```
pip install lpakit[test]
pytest
```