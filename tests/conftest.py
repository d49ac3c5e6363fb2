import struct

import pytest


ATC_MAGIC = b'ALIVE\x00\x00\x00'

INFO_SLOTS = (32, 40, 44, 32, 32, 32, 52)


def signed_byte_sum(data):
    total = 0
    for byte in data:
        total += byte - 0x100 if byte >= 0x80 else byte

    return total % (1 << 32)


class ATCBuilder:
    '''Builds the bytes of ATC files for the tests.'''

    def block(self, tag, payload, length=None, checksum=None):
        length = len(payload) if length is None else length
        header = tag + struct.pack('<I', length)

        if checksum is None:
            checksum = signed_byte_sum((header + payload)[:8 + length])

        return header + payload + struct.pack('<I', checksum)

    def fmt(self, frequency=300, resolution=200, flags=0, format=1):
        return self.block(b'fmt ', struct.pack('<BHHBH', format, frequency, resolution, flags, 0))

    def info(self, *values):
        values = list(values) + [b''] * (len(INFO_SLOTS) - len(values))
        payload = b''.join(value.ljust(size, b'\x00') for value, size in zip(values, INFO_SLOTS))

        return self.block(b'info', payload)

    def ecg(self, samples, tag=b'ecg '):
        return self.block(tag, struct.pack('<%dh' % len(samples), *samples))

    def file(self, *blocks, version=1):
        return ATC_MAGIC + struct.pack('<I', version) + b''.join(blocks)


@pytest.fixture
def atc():
    return ATCBuilder()
