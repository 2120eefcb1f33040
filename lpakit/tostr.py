"""Enumerations of eUICC values and their textual names."""

from __future__ import annotations

from enum import IntEnum

NO_STR_AVAILABLE = "(no_str_available)"


class ProfileState(IntEnum):
    NULL = -1
    UNDEFINED = -2
    DISABLED = 0
    ENABLED = 1


class ProfileClass(IntEnum):
    NULL = -1
    UNDEFINED = -2
    TEST = 0
    PROVISIONING = 1
    OPERATIONAL = 2


class IconType(IntEnum):
    NULL = -1
    UNDEFINED = -2
    JPEG = 0
    PNG = 1


class ProfileManagementOperation(IntEnum):
    NULL = -1
    UNDEFINED = -2
    INSTALL = 0
    ENABLE = 1
    DISABLE = 2
    DELETE = 3


class BppCommandId(IntEnum):
    UNDEFINED = -1
    INITIALISE_SECURE_CHANNEL = 0
    CONFIGURE_ISDP = 1
    STORE_METADATA = 2
    STORE_METADATA2 = 3
    REPLACE_SESSION_KEYS = 4
    LOAD_PROFILE_ELEMENTS = 5


class ErrorReason(IntEnum):
    UNDEFINED = -1
    INCORRECT_INPUT_VALUES = 1
    INVALID_SIGNATURE = 2
    INVALID_TRANSACTION_ID = 3
    UNSUPPORTED_CRT_VALUES = 4
    UNSUPPORTED_REMOTE_OPERATION_TYPE = 5
    UNSUPPORTED_PROFILE_CLASS = 6
    SCP03T_STRUCTURE_ERROR = 7
    SCP03T_SECURITY_ERROR = 8
    INSTALL_FAILED_DUE_TO_ICCID_ALREADY_EXISTS_ON_EUICC = 9
    INSTALL_FAILED_DUE_TO_INSUFFICIENT_MEMORY_FOR_PROFILE = 10
    INSTALL_FAILED_DUE_TO_INTERRUPTION = 11
    INSTALL_FAILED_DUE_TO_PE_PROCESSING_ERROR = 12
    INSTALL_FAILED_DUE_TO_DATA_MISMATCH = 13
    TEST_PROFILE_INSTALL_FAILED_DUE_TO_INVALID_NAA_KEY = 14
    PPR_NOT_ALLOWED = 15
    INSTALL_FAILED_DUE_TO_UNKNOWN_ERROR = 127


def _named(enum_cls: type[IntEnum], names: dict[str, str]) -> dict[IntEnum, str | None]:
    table: dict[IntEnum, str | None] = {member: names[member.name] for member in enum_cls if member.name in names}
    if "NULL" in enum_cls.__members__:
        table[enum_cls["NULL"]] = None
    table[enum_cls["UNDEFINED"]] = "unknown"
    return table


_PROFILE_STATE = _named(ProfileState, {"DISABLED": "disabled", "ENABLED": "enabled"})
_PROFILE_CLASS = _named(
    ProfileClass, {"TEST": "test", "PROVISIONING": "provisioning", "OPERATIONAL": "operational"}
)
_ICON_TYPE = _named(IconType, {"JPEG": "jpeg", "PNG": "png"})
_PROFILE_MANAGEMENT_OPERATION = _named(
    ProfileManagementOperation,
    {"INSTALL": "install", "ENABLE": "enable", "DISABLE": "disable", "DELETE": "delete"},
)
_BPP_COMMAND_ID = _named(
    BppCommandId,
    {member.name: member.name.lower() for member in BppCommandId if member is not BppCommandId.UNDEFINED},
)
_ERROR_REASON = _named(
    ErrorReason,
    {member.name: member.name.lower() for member in ErrorReason if member is not ErrorReason.UNDEFINED},
)


def _lookup(table: dict[IntEnum, str | None], value: object) -> str | None:
    try:
        return table[value]  # type: ignore[index]
    except (KeyError, TypeError):
        return NO_STR_AVAILABLE


def profile_state_to_str(value: object) -> str | None:
    """Name a profile state; None for NULL."""
    return _lookup(_PROFILE_STATE, value)


def profile_class_to_str(value: object) -> str | None:
    """Name a profile class; None for NULL."""
    return _lookup(_PROFILE_CLASS, value)


def icon_type_to_str(value: object) -> str | None:
    """Name an icon type; None for NULL."""
    return _lookup(_ICON_TYPE, value)


def profile_management_operation_to_str(value: object) -> str | None:
    """Name a profile management operation; None for NULL."""
    return _lookup(_PROFILE_MANAGEMENT_OPERATION, value)


def bpp_command_id_to_str(value: object) -> str | None:
    """Name a bound profile package command id."""
    return _lookup(_BPP_COMMAND_ID, value)


def error_reason_to_str(value: object) -> str | None:
    """Name a profile installation error reason."""
    return _lookup(_ERROR_REASON, value)