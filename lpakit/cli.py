"""Command line entry point and environment configuration."""

from __future__ import annotations

import os
import sys
from collections.abc import Mapping, Sequence
from typing import TextIO

from lpakit.applet import Applet, applet_entry
from lpakit.hexutil import hex2bin
from lpakit.jprint import jprint_success

VERSION = "2.3.0"
PROG = "lpakit"

ENV_APDU_DEBUG = "LPAC_APDU_DEBUG"
ENV_HTTP_DEBUG = "LPAC_HTTP_DEBUG"
ENV_APDU_DEBUG_DEPRECATED = "LIBEUICC_DEBUG_APDU"
ENV_HTTP_DEBUG_DEPRECATED = "LIBEUICC_DEBUG_HTTP"
ENV_ISD_R_AID = "LPAC_CUSTOM_ISD_R_AID"
ENV_ES10X_MSS = "LPAC_CUSTOM_ES10X_MSS"

DEFAULT_ISD_R_AID = "A0000005591010FFFFFFFF8900000100"
ISD_R_AID_MIN_LENGTH = 2
ISD_R_AID_MAX_LENGTH = 32
ES10X_MSS_MIN_VALUE = 6
ES10X_MSS_MAX_VALUE = 255

_TRUE_WORDS = frozenset({"1", "true", "yes", "on", "y"})


class ConfigError(ValueError):
    """Raised when a configuration value from the environment is invalid."""


def _env(environ: Mapping[str, str] | None) -> Mapping[str, str]:
    return os.environ if environ is None else environ


def _env_flag(environ: Mapping[str, str], name: str, deprecated: str) -> bool:
    value = environ.get(name)
    if value is None:
        value = environ.get(deprecated)
    if value is None:
        return False
    return value.strip().lower() in _TRUE_WORDS


def setup_isdr_aid(environ: Mapping[str, str] | None = None) -> bytes:
    """Return the ISD-R applet id from the environment, or the standard one."""
    value = _env(environ).get(ENV_ISD_R_AID, DEFAULT_ISD_R_AID)
    n = len(value)
    if n % 2 or n < ISD_R_AID_MIN_LENGTH or n > ISD_R_AID_MAX_LENGTH:
        raise ConfigError("invalid custom ISD-R applet id given")
    try:
        return hex2bin(value)
    except ValueError as exc:
        raise ConfigError("invalid custom ISD-R applet id given") from exc


def setup_es10x_mss(environ: Mapping[str, str] | None = None) -> int:
    """Return the ES10x segment size from the environment; 0 means the default."""
    raw = _env(environ).get(ENV_ES10X_MSS)
    if raw is None:
        return 0
    try:
        value = int(raw.strip() or "0", 10)
    except ValueError as exc:
        raise ConfigError("invalid custom ES10x MSS given") from exc
    if value == 0:
        return 0
    if not ES10X_MSS_MIN_VALUE <= value <= ES10X_MSS_MAX_VALUE:
        raise ConfigError("invalid custom ES10x MSS given")
    return value


def setup_logger(
    environ: Mapping[str, str] | None = None, stream: TextIO | None = None
) -> tuple[TextIO | None, TextIO | None]:
    """Return the APDU and HTTP trace streams selected by the environment."""
    env = _env(environ)
    out = sys.stderr if stream is None else stream
    if out is None:
        raise ConfigError("invalid log file given")
    apdu_fp = out if _env_flag(env, ENV_APDU_DEBUG, ENV_APDU_DEBUG_DEPRECATED) else None
    http_fp = out if _env_flag(env, ENV_HTTP_DEBUG, ENV_HTTP_DEBUG_DEPRECATED) else None
    return apdu_fp, http_fp


def version_main(argv: Sequence[str] | None = None) -> int:
    """Print the program version as a success result."""
    jprint_success(VERSION)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Dispatch to the sub-command named by the first argument."""
    args = list(sys.argv[1:] if argv is None else argv)
    applets = [Applet("version", version_main)]
    return applet_entry([PROG, *args], applets)