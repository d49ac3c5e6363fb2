"""
A Field is "fundamental" datatype from the format point of view, something directly
unpackable from a stream without knowing anything about sub-components.
"""
import logging
import struct
from enum import Enum, Flag, auto

from bitstring import Bits

from .meta import FieldBase
from .properties import Dependency, ChunkPhase, PropertyDescriptor
from .exceptions import ATCException, FormatError, MagicException


# every integer of the container is little-endian
BYTE_ORDER = '<'


class Field(FieldBase):
    """Base class to subclass from"""

    def __init__(self, *args, name=None, father=None, default=None, offset=None,
                 is_magic=False):
        super().__init__()
        self._phase = ChunkPhase.INIT
        self.logger = logging.getLogger(__name__)
        self.name = name
        self.father = father
        self.default = default
        self.offset = offset
        self.is_magic = is_magic

        self.init()

    def init(self):
        self.value = self.value_from_default()

    def value_from_default(self):
        return self.default

    def __str__(self):
        return str(self.value)

    def _get_value(self):
        return self._value

    def _set_value(self, value) -> None:
        self._value = value

    value = property(
        fget=lambda self: self._get_value(),
        fset=lambda self, value: self._set_value(value))

    def _get_size(self):
        raise NotImplementedError(f"method {self.__class__.__name__}._get_size() not implemented")

    size = property(
        fget=lambda self: self._get_size(),
    )

    def _read(self, stream, size: int) -> bytes:
        '''Read exactly "size" bytes from the stream, a short read means
        that the data is truncated.'''
        raw = stream.read(size)

        if len(raw) != size:
            exc = MagicException if self.is_magic else FormatError
            raise exc(f'\'{self.name}\' needs {size} bytes but only {len(raw)} are left', chain=[])

        return raw

    def unpack(self, stream):
        raise NotImplementedError('you need to implement this in the subclass')


class StructField(Field):
    """
    Simplest of the fields: mimic the behaviour of the struct module unpacking
    integers (or short fixed strings) from bytes.

    The main advantage is the possibility to indicate via the "enum" argument some subclass
    of enum.Enum so to have directly a representation of the value of the field itself;
    a value outside the enum is kept as it is.
    """

    def __init__(self, format, default=0, enum=None, **kw):
        self.format = format
        self.enum = enum
        super().__init__(default=default, **kw)

    def _get_encoder(self):
        return repr if isinstance(self.value, bytes) else hex

    def __repr__(self):
        if not isinstance(self.value, Enum):
            return '<%s(%s)>' % (self.__class__.__name__, self._get_encoder()(self.value))

        return f'<{self.__class__.__name__}({self.value!r})>'

    def value_from_default(self):
        if not self.enum:
            return super().value_from_default()

        return self._unpack_enum(self.default)

    def get_format(self):
        return '%s%s' % (BYTE_ORDER, self.format)

    def _get_size(self):
        return struct.calcsize(self.get_format())

    def _unpack_struct(self, raw: bytes):
        try:
            unpacked_value = struct.unpack(self.get_format(), raw)[0]
        except struct.error as e:
            self.logger.debug(e)
            exc = MagicException if self.is_magic else FormatError
            raise exc(f'\'{self.name}\': {e}', chain=[])

        return unpacked_value

    def _unpack_enum(self, value):
        try:
            return self.enum(value)
        except ValueError:
            self.logger.debug(f'enum {self.enum.__name__} doesn\'t have element with value {value!r} in it')

        return value

    def _unpack(self, raw):
        value = self._unpack_struct(raw)
        if self.enum:
            value = self._unpack_enum(value)

        if self.is_magic and value != self.default:
            raise MagicException(f'\'{self.name}\' is {value!r} instead of {self.default!r}', chain=[])

        return value

    def unpack(self, stream):
        self.value = self._unpack(stream.read(self.size))


class BitField(StructField):
    """An integer where each bit has its own meaning.

        class Header(Chunk):
            flags = fields.BitField('B')

        header.flags.is_set(1)  # True for 0b00000010
    """

    @property
    def bits(self) -> Bits:
        return Bits(uint=self.value, length=self.size * 8)

    def is_set(self, bit) -> bool:
        if isinstance(bit, Enum):
            bit = bit.value

        # bitstring counts from the most significant bit
        return self.bits[-1 - bit]

    def __repr__(self):
        return '<%s(0b%s)>' % (self.__class__.__name__, self.bits.bin)


class StringField(Field):
    """Represent a contiguous chunk of bytes."""

    length = PropertyDescriptor('length', int)

    def __init__(self, n=None, **kw):
        if n is None and 'default' not in kw:
            raise ValueError(f"StringField must have 'n' or 'default' indicated!")

        self.length = n if n is not None else len(kw['default'])

        super().__init__(**kw)

    def __repr__(self):
        return '<%s(%s)>' % (self.__class__.__name__, repr(self.value))

    def value_from_default(self):
        if self.default is not None:
            return self.default

        length = self.__dict__['length']

        return b'\x00' * length if isinstance(length, int) else b''

    def _get_size(self):
        return len(self.value)

    def unpack(self, stream):
        raw = self._read(stream, self.length)

        if self.is_magic and raw != self.default:
            raise MagicException(f'\'{self.name}\' is {raw!r} instead of {self.default!r}', chain=[])

        self.value = raw


class TextField(StringField):
    """Fixed-width slot of text padded with NULs.

    The content is not guaranteed to be valid in any encoding, so "text"
    falls back to latin1 when the declared one doesn't work."""

    def __init__(self, n, encoding='utf-8', **kw):
        self.encoding = encoding
        super().__init__(n, **kw)

    @property
    def text(self) -> str:
        raw = self.value.split(b'\x00', 1)[0].strip()

        try:
            return raw.decode(self.encoding)
        except UnicodeDecodeError:
            self.logger.warning('field \'%s\' is not valid %s, falling back to latin1' % (self.name, self.encoding))

        return raw.decode('latin1')


class SkipField(Field):
    '''Consumes bytes from the stream without interpreting them.'''

    length = PropertyDescriptor('length', int)

    def __init__(self, n, **kw):
        self.length = n
        super().__init__(**kw)

    def __repr__(self):
        return '<%s(%d)>' % (self.__class__.__name__, self.length)

    def _get_size(self):
        return self.length

    def unpack(self, stream):
        length = self.length
        if stream.remaining() < length:
            raise FormatError(f'\'{self.name}\' needs to skip {length} bytes but only {stream.remaining()} are left', chain=[])

        self.logger.debug('skipping %d bytes at offset %d' % (length, stream.tell()))
        stream.seek(stream.tell() + length)


class StructArrayField(Field):
    '''Sequence of values sharing the same struct format, unpacked in one go
    into a tuple.

    The number of elements is given by "n", usually as a Dependency.'''

    n = PropertyDescriptor('n', int)

    def __init__(self, format, n=0, **kw):
        self.format = format
        self.n = n
        kw.setdefault('default', ())
        super().__init__(**kw)

    def __repr__(self):
        return '<%s(%d x %s)>' % (self.__class__.__name__, len(self.value), self.format)

    def __getitem__(self, item):
        return self.value[item]

    def __len__(self):
        return len(self.value)

    def value_from_default(self):
        return tuple(self.default)

    def get_format(self, n):
        return '%s%d%s' % (BYTE_ORDER, n, self.format)

    def _get_size(self):
        return struct.calcsize(self.get_format(len(self.value)))

    def unpack(self, stream):
        fmt = self.get_format(self.n)
        raw = self._read(stream, struct.calcsize(fmt))

        self.value = struct.unpack(fmt, raw)


class ArrayField(Field):
    '''Unpack an array of Chunks (or fields).

    You can indicate an explicit number of elements via the parameter named "n",
    otherwise the elements are unpacked until the stream is exhausted.
    Each element is named after its index.
    '''

    def __init__(self, field_cls, n=None, **kw):
        self.field_cls = field_cls
        if n is not None and not isinstance(n, (int, Dependency)):
            raise ValueError('n is \'%s\' must be of the right type' % n.__class__.__name__)

        kw.setdefault('default', [])
        super().__init__(**kw)
        self._n = n

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.value!r})>'

    def __getitem__(self, item):
        return self.value[item]

    def __len__(self):
        return len(self.value)

    def __iter__(self):
        return iter(self.value)

    def value_from_default(self):
        return list(self.default)

    @property
    def n(self):
        if isinstance(self._n, Dependency):
            return self._n.resolve(self)

        return self._n

    def _get_size(self):
        return sum(element.size for element in self.value)

    def instance_element(self, idx):
        element = self.field_cls.create(father=self)  # pass the father so that we don't lose the hierarchy
        element.name = str(idx)

        return element

    def _has_more(self, stream, idx, n):
        if n is not None:
            return idx < n

        return not stream.at_eof()

    def unpack(self, stream):
        self.value = []
        n = self.n

        idx = 0
        while self._has_more(stream, idx, n):
            element = self.instance_element(idx)
            element.offset = stream.tell()
            self.logger.debug('unpacking %s[%d] at offset %d' % (self.name, idx, element.offset))

            try:
                element.unpack(stream)
            except ATCException as e:
                e.chain.append(str(idx))
                raise

            self.value.append(element)
            idx += 1


class SelectField(Field):
    """Allow to select the kind of final field based on the value of another field.
    You need to pass the path of the field to use as key and a dictionary with the mapping
    between value and (class, args, kwargs) of the field. You can use Type.DEFAULT as a default.

    Like in the following example we have a format that uses the first 4 bytes to indicate what
    follows: for value zero you have another 4 bytes, otherwise you have a sixteen bytes string

        type2field = {
            0: (fields.StructField, ('I',), {}),
            fields.SelectField.Type.DEFAULT: (fields.StringField, (0x10,), {}),
        }

        class DummyChunk(Chunk):
            type = fields.StructField('I')
            data = fields.SelectField('.type', type2field)
    """
    class Type(Flag):
        DEFAULT = auto()

    def __init__(self, key, mapping, *args, **kwargs):
        self._key = key if isinstance(key, Dependency) else Dependency(key)
        self._mapping = mapping
        self._field = None

        super().__init__(*args, **kwargs)

    def __repr__(self):
        return f'<{self.__class__.__name__}{self._field!r}>'

    @property
    def field(self):
        '''The field actually selected during the unpacking.'''
        return self._field

    def _get_value(self):
        return self._field.value if self._field is not None else None

    def _set_value(self, value):
        if self._field is not None:
            self._field.value = value

    def _get_size(self) -> int:
        return self._field.size if self._field is not None else 0

    def select(self):
        key = self._key.resolve(self)

        return key if key in self._mapping else SelectField.Type.DEFAULT

    def unpack(self, stream):
        key = self.select()

        self.logger.debug('using key \'%s\' for \'%s\'' % (key, self.name))

        field_class, args, kwargs = self._mapping[key]
        self._field = field_class(*args, **kwargs)
        self._field.name = self.name
        self._field.father = self.father
        self._field.offset = stream.tell()

        self._field.unpack(stream)
