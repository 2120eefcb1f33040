import pytest

from lpakit.hexutil import bin2gsmbcd, bin2hex, gsmbcd2bin, hex2bin

ISD_R_AID = "A0000005591010FFFFFFFF8900000100"


def test_bin2hex_is_lower_case():
    assert bin2hex(b"\xde\xad\xbe\xef") == "deadbeef"


def test_isd_r_aid_round_trip():
    raw = hex2bin(ISD_R_AID)
    assert len(raw) == len(ISD_R_AID) // 2
    assert bin2hex(raw).upper() == ISD_R_AID


@pytest.mark.parametrize("data", [b"", b"\x00", bytes(range(256)), b"\xff\x10\x7f"])
def test_hex_round_trip(data):
    assert hex2bin(bin2hex(data)) == data


def test_hex2bin_accepts_both_cases():
    assert hex2bin("abCD") == hex2bin("ABcd")


@pytest.mark.parametrize("text", ["a", "abc", "0"])
def test_hex2bin_rejects_odd_length(text):
    with pytest.raises(ValueError):
        hex2bin(text)


@pytest.mark.parametrize("text", ["zz", "0g", " 1", "12 3"])
def test_hex2bin_rejects_invalid_characters(text):
    with pytest.raises(ValueError):
        hex2bin(text)


def test_gsmbcd2bin_swaps_nibbles():
    assert gsmbcd2bin("1234", 0) == b"\x21\x43"


def test_gsmbcd2bin_pads_odd_and_to_length():
    assert gsmbcd2bin("123", 4) == b"\x21\xf3\xff\xff"


def test_gsmbcd2bin_padding_length():
    encoded = gsmbcd2bin("89", 10)
    assert len(encoded) == 10
    assert encoded[1:] == b"\xff" * 9


def test_gsmbcd2bin_no_padding_when_longer():
    assert len(gsmbcd2bin("12345678", 2)) == 4


def test_gsmbcd2bin_rejects_non_hex():
    with pytest.raises(ValueError):
        gsmbcd2bin("12x4", 0)


@pytest.mark.parametrize(
    "digits", ["8944476500001224158", "89049032000000000000", "1", "12", "0123456789"]
)
@pytest.mark.parametrize("padding", [0, 10, 20])
def test_gsmbcd_round_trip(digits, padding):
    assert bin2gsmbcd(gsmbcd2bin(digits, padding)) == digits


def test_bin2gsmbcd_empty():
    assert bin2gsmbcd(b"") == ""