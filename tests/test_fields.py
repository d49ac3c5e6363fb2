import pytest

from atcstruct.core import Chunk
from atcstruct.enum import BlockTag, FmtFlag
from atcstruct.exceptions import FormatError, MagicException
from atcstruct.fields import (
    StructField,
    BitField,
    StringField,
    TextField,
    SkipField,
    StructArrayField,
    ArrayField,
    SelectField,
)
from atcstruct.properties import Dependency, RatioDependency
from atcstruct.streams import Stream


def test_structfield_unpack():
    """Check that "value" is the integer represented by the bytes read."""
    field = StructField('I')

    assert field.size == 4
    assert field.value == 0

    stream = Stream(b'\x01\x02\x03\x04\xff')
    field.unpack(stream)

    assert field.value == 0x04030201
    assert stream.tell() == 4


def test_structfield_little_endian():
    field = StructField('H')

    field.unpack(Stream(b'\xca\xfe'))

    assert field.value == 0xfeca


def test_structfield_short_read():
    field = StructField('I', name='length')

    with pytest.raises(FormatError) as e:
        field.unpack(Stream(b'\x01\x02'))

    assert e.value.chain == []
    assert 'length' in str(e.value)


def test_structfield_enum():
    """A value outside the enum is kept as it is."""
    field = StructField('4s', enum=BlockTag, default=b'\x00' * 4)

    assert field.value == b'\x00' * 4

    field.unpack(Stream(b'fmt '))
    assert field.value == BlockTag.FMT

    field.unpack(Stream(b'ecg2'))
    assert field.value == BlockTag.ECG2

    field.unpack(Stream(b'ECG '))
    assert field.value == b'ECG '


def test_bitfield():
    field = BitField('B')

    field.unpack(Stream(b'\x02'))

    assert field.value == 2
    assert field.bits.bin == '00000010'
    assert field.is_set(1)
    assert field.is_set(FmtFlag.MAINS_60HZ)
    assert not field.is_set(0)
    assert not field.is_set(7)


def test_stringfield():
    field = StringField(0x10)

    assert field.size == 0x10
    assert field.value == b'\x00' * field.size

    data = bytes(range(0x10))
    field.unpack(Stream(data + b'\xff'))

    assert field.value == data


def test_stringfield_magic():
    field = StringField(5, default=b'HELLO', is_magic=True)

    field.unpack(Stream(b'HELLO'))
    assert field.value == b'HELLO'

    with pytest.raises(MagicException):
        field.unpack(Stream(b'HELL0'))

    # not enough data for the magic is a magic failure too
    with pytest.raises(MagicException):
        field.unpack(Stream(b'HEL'))


def test_textfield():
    field = TextField(0x10)

    field.unpack(Stream(b' iPhone10,3\x00\x00garbage'))
    assert field.text == 'iPhone10,3'

    field.unpack(Stream('città'.encode('utf-8').ljust(0x10, b'\x00')))
    assert field.text == 'città'

    # not valid utf-8
    field.unpack(Stream(b'caf\xe9'.ljust(0x10, b'\x00')))
    assert field.text == 'café'


def test_skipfield():
    field = SkipField(3)

    stream = Stream(b'\x01\x02\x03\x04')
    field.unpack(stream)

    assert stream.tell() == 3

    with pytest.raises(FormatError):
        field.unpack(stream)


def test_structarrayfield():
    field = StructArrayField('h', n=3)

    assert field.value == ()

    field.unpack(Stream(b'\x01\x00\xff\xff\x00\x80'))

    assert field.value == (1, -1, -32768)
    assert len(field) == 3
    assert field[1] == -1
    assert field.size == 6

    with pytest.raises(FormatError):
        field.unpack(Stream(b'\x01\x00'))


def test_structarrayfield_w_ratio_dependency():
    class Samples(Chunk):
        length = StructField('I')
        samples = StructArrayField('h', n=RatioDependency(2, '.length'))

    samples = Samples(b'\x04\x00\x00\x00' + b'\x0a\x00\x0b\x00')

    assert samples.samples.value == (10, 11)

    with pytest.raises(FormatError) as e:
        Samples(b'\x03\x00\x00\x00' + b'\x0a\x00\x0b')

    assert e.value.chain == ['samples']


def test_arrayfield_until_end_of_stream():
    class Entry(Chunk):
        a = StructField('H')

    class Table(Chunk):
        entries = ArrayField(Entry())

    table = Table(b'\x01\x00\x02\x00\x03\x00')

    assert len(table.entries) == 3
    assert [_.a.value for _ in table.entries] == [1, 2, 3]
    assert [_.offset for _ in table.entries] == [0, 2, 4]

    # elements are not shared
    assert table.entries[0] is not table.entries[1]
    assert table.entries[0].father is table.entries

    with pytest.raises(FormatError) as e:
        Table(b'\x01\x00\x02')

    assert e.value.path == 'entries.1.a'


def test_arrayfield_w_dependency():
    class Counted(Chunk):
        count = StructField('B')
        items = ArrayField(StructField('B'), n=Dependency('.count'))
        tail  = StructField('B')

    counted = Counted(b'\x02\x0a\x0b\x0c')

    assert counted.items.n == 2
    assert [_.value for _ in counted.items] == [0x0a, 0x0b]
    assert counted.tail.value == 0x0c


def test_arrayfield_element_names():
    class Counted(Chunk):
        count = StructField('B')
        items = ArrayField(StructField('B'), n=Dependency('.count'))

    counted = Counted(b'\x02\x0a\x0b')

    assert [_.name for _ in counted.items] == ['0', '1']

    with pytest.raises(FormatError) as e:
        Counted(b'\x03\x0a\x0b')

    assert e.value.path == 'items.2'
    assert str(e.value).startswith('\'2\': ')
    assert 'None' not in str(e.value)


def test_dependency_is_relative_to_the_father():
    with pytest.raises(ValueError):
        Dependency('length')


def test_selectfield():
    type2field = {
        0: (StructField, ('I',), {}),
        SelectField.Type.DEFAULT: (StringField, (0x4,), {}),
    }

    class DummyChunk(Chunk):
        kind = StructField('I')
        data = SelectField('.kind', type2field)

    dummy = DummyChunk(b'\x00\x00\x00\x00\x01\x02\x03\x04')

    assert isinstance(dummy.data.field, StructField)
    assert dummy.data.value == 0x04030201

    dummy = DummyChunk(b'\x07\x00\x00\x00\x01\x02\x03\x04')

    assert isinstance(dummy.data.field, StringField)
    assert dummy.data.value == b'\x01\x02\x03\x04'
    assert dummy.data.field.father is dummy
