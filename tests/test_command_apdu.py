import pytest

from apdukit.core.smartcard import CommandApdu, InvalidArgument


def test_header_only_has_trailing_le():
    apdu = CommandApdu(0x00, 0xA4, 0x04, 0x00)
    assert apdu.to_bytes() == bytes([0x00, 0xA4, 0x04, 0x00, 0x00])
    assert apdu.case == 1


@pytest.mark.parametrize("length", [0, 1, 4, 255])
def test_data_is_prefixed_with_lc(length):
    data = bytes(range(length))
    raw = CommandApdu(0x80, 0x10, 0x01, 0x02, data=data, le=0).to_bytes()
    assert len(raw) == 4 + 1 + length + 1
    assert raw[4] == length
    assert raw[5 : 5 + length] == data
    assert raw[-1] == 0x00


def test_select_pse_encoding():
    apdu = CommandApdu(cla=0x00, ins=0xA4, p1=0x04, p2=0x00, data=[0x31, 0x50, 0x41, 0x59])
    assert apdu.to_hex() == "00a40400043150415900"
    assert repr(apdu) == "00 A4 04 00 04 31 50 41 59 00"


def test_set_le_only_touches_last_byte():
    apdu = CommandApdu(0x00, 0xB2, 0x01, 0x14, data=b"\x01\x02", le=0x00)
    before = apdu.to_bytes()
    apdu.set_le(0x10)
    after = apdu.to_bytes()
    assert after[:-1] == before[:-1]
    assert after[-1] == 0x10
    assert apdu.data == b"\x01\x02"


def test_case_uses_presence_not_value():
    assert CommandApdu(0, 0xC0, 0, 0, le=0).case == 2
    assert CommandApdu(0, 0xA4, 0, 0, data=b"").case == 3
    assert CommandApdu(0, 0xA4, 0, 0, data=b"\x3f\x00", le=0).case == 4
    # no Le and Le=00 share a wire form
    assert CommandApdu(0, 0xCA, 0, 0).to_bytes() == CommandApdu(0, 0xCA, 0, 0, le=0).to_bytes()


@pytest.mark.parametrize("field", ["cla", "ins", "p1", "p2", "le"])
@pytest.mark.parametrize("value", [-1, 256, "00"])
def test_header_out_of_range(field, value):
    fields = {"cla": 0, "ins": 0xA4, "p1": 0, "p2": 0}
    fields[field] = value
    with pytest.raises(InvalidArgument):
        CommandApdu(**fields)


def test_data_too_long():
    with pytest.raises(InvalidArgument, match="255"):
        CommandApdu(0, 0xD6, 0, 0, data=bytes(256))


def test_data_not_bytes():
    with pytest.raises(InvalidArgument):
        CommandApdu(0, 0xD6, 0, 0, data=[0x100])


def test_set_le_rejects_wide_value():
    apdu = CommandApdu(0, 0xB0, 0, 0, le=0)
    with pytest.raises(InvalidArgument):
        apdu.set_le(0x100)
    assert apdu.le == 0


def test_invalid_argument_is_value_error():
    with pytest.raises(ValueError):
        CommandApdu(0x1FF, 0, 0, 0)


def test_fields_are_read_only():
    apdu = CommandApdu(0, 0xA4, 0, 0)
    with pytest.raises(AttributeError):
        apdu.ins = 0xB0


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("00A40400", CommandApdu(0x00, 0xA4, 0x04, 0x00)),
        ("00C0000010", CommandApdu(0x00, 0xC0, 0x00, 0x00, le=0x10)),
        ("00A40400023F00", CommandApdu(0x00, 0xA4, 0x04, 0x00, data=b"\x3f\x00")),
        ("00A40400023F0000", CommandApdu(0x00, 0xA4, 0x04, 0x00, data=b"\x3f\x00", le=0)),
    ],
)
def test_from_bytes(raw, expected):
    assert CommandApdu.from_bytes(bytes.fromhex(raw)) == expected


@pytest.mark.parametrize("raw", ["00A404", "00A40400053F00"])
def test_from_bytes_rejects_bad_input(raw):
    with pytest.raises(InvalidArgument):
        CommandApdu.from_bytes(bytes.fromhex(raw))
