'''
Fields and functions to handle the additive checksum trailing each block
of a tagged container.

The checksum is the sum of the bytes of the block header and of the payload,
each byte taken as a signed 8-bit integer, accumulated in a 32-bit register
and stored as unsigned little-endian. A byte with the high bit set lowers the sum.
'''
import logging
import struct

from .. import fields
from ..exceptions import FormatError, ChecksumError
from ..properties import PropertyDescriptor


logger = logging.getLogger(__name__)

CHECKSUM_SIZE = 4
BLOCK_HEADER_SIZE = 8


def calc_checksum(data) -> int:
    '''The wrapping signed 32-bit accumulator, reinterpreted as unsigned,
    is just the sum modulo 2**32.'''
    signed_bytes = struct.unpack('%db' % len(data), data)

    return sum(signed_bytes) & 0xffffffff


def verify(buffer, block_start: int, length: int, cursor: int) -> None:
    '''Compare the checksum stored at "cursor" with the one calculated over the
    block header and payload starting at "block_start" of "buffer".'''
    raw = bytes(buffer[cursor:cursor + CHECKSUM_SIZE])
    if len(raw) != CHECKSUM_SIZE:
        raise FormatError(f'checksum at offset {cursor} is truncated', chain=[])

    end = block_start + BLOCK_HEADER_SIZE + length
    if end > len(buffer):
        raise FormatError(f'block at offset {block_start} extends past the end of the data', chain=[])

    stored = struct.unpack('<I', raw)[0]
    expected = calc_checksum(buffer[block_start:end])

    logger.debug('checksum for block at offset %d: expected=%08x stored=%08x' % (block_start, expected, stored))

    if expected != stored:
        raise ChecksumError(expected, stored, chain=[])


class ChecksumField(fields.StructField):
    """Trailing checksum of a block: the block is the father of this field
    and "span" is the length of its payload.

    The verification happens while unpacking, against the data of the stream
    so that what is checked is exactly what was read. Passing "verify_if"
    it's possible to skip the verification for some blocks (the value is
    consumed anyway).
    """

    span = PropertyDescriptor('span', int)

    def __init__(self, span, *args, verify_if=None, **kwargs):
        super().__init__('I', *args, **kwargs)
        self.span = span
        self._verify_if = verify_if

    def unpack(self, stream):
        cursor = stream.tell()

        super().unpack(stream)

        if self._verify_if is not None and not self._verify_if(self.father):
            self.logger.debug('checksum at offset %d not verified' % cursor)
            return

        verify(stream.view(), self.father.offset, self.span, cursor)
