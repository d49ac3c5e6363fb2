import struct

import pytest

from atcstruct.common.checksum import calc_checksum, verify, ChecksumField
from atcstruct.core import Chunk
from atcstruct.exceptions import ChecksumError, FormatError
from atcstruct.fields import StructField, StringField
from atcstruct.properties import Dependency


def test_calc_checksum():
    assert calc_checksum(b'A\x02\x03z') == 192
    assert calc_checksum(b'') == 0


@pytest.mark.parametrize('idx', range(4))
def test_calc_checksum_is_sign_sensitive(idx):
    """A byte with the high bit set counts as a negative number."""
    data = bytearray(b'A\x02\x03z')
    data[idx] ^= 0x80

    assert calc_checksum(bytes(data)) == 192 - 0x80


def test_calc_checksum_wraps_as_unsigned():
    assert calc_checksum(b'\xff') == 0xffffffff
    assert calc_checksum(b'\x80' * 4) == 0xfffffe00
    assert calc_checksum(b'\xff\x01') == 0


def test_calc_checksum_on_memoryview():
    data = b'....A\x02\x03z....'

    assert calc_checksum(memoryview(data)[4:8]) == 192


def make_block(payload):
    block = b'tag!' + struct.pack('<I', len(payload)) + payload
    return block + struct.pack('<I', calc_checksum(block))


def test_verify():
    data = b'\x00' * 3 + make_block(b'\x01\x02\x80\xff')

    verify(data, 3, 4, 3 + 8 + 4)


def test_verify_tampered():
    data = bytearray(make_block(b'\x01\x02\x80\xff'))
    stored = struct.unpack('<I', data[-4:])[0]

    data[9] ^= 0x01

    with pytest.raises(ChecksumError) as e:
        verify(bytes(data), 0, 4, 12)

    assert e.value.stored == stored
    assert e.value.expected != e.value.stored
    assert e.value.expected == calc_checksum(bytes(data[:12]))
    assert str(e.value.expected) in str(e.value)


def test_verify_truncated():
    data = make_block(b'\x01\x02')

    with pytest.raises(FormatError):
        verify(data[:-1], 0, 2, 10)

    with pytest.raises(FormatError):
        verify(data, 0, 0x100, 10)


class Block(Chunk):
    tag      = StringField(4)
    length   = StructField('I')
    data     = StringField(Dependency('.length'))
    checksum = ChecksumField(Dependency('.length'), verify_if=lambda block: block.tag.value != b'skip')


def test_checksum_field():
    data = make_block(b'kebab')

    block = Block(data)

    assert block.checksum.value == calc_checksum(data[:-4])

    with pytest.raises(ChecksumError) as e:
        Block(data[:-1] + b'\x01')

    assert e.value.chain == ['checksum']


def test_checksum_field_not_verified():
    data = b'skip' + struct.pack('<I', 2) + b'\x01\x02' + b'\xde\xad\xbe\xef'

    block = Block(data)

    assert block.checksum.value == 0xefbeadde
