"""
Core module for the abstraction of a file format

"""
from typing import Tuple, List, Dict

from .fields import Field
from .meta import MetaChunk
from .streams import Stream
from .exceptions import ATCException
from .properties import (
    get_root_from_chunk,
    ChunkPhase,
)


class Chunk(Field, metaclass=MetaChunk):
    """
    Together with Field is the main class that defines a format: its main attributes
    are offset and size that identify a Chunk.

    A Chunk contains sub-fields, declared as class attributes, that are
    unpacked in the order of declaration.

    Passing some data (bytes or a path) to the constructor unpacks it immediately.
    """

    def __init__(self, data=None, **kwargs):
        self.stream = Stream(data) if data is not None else None
        super().__init__(**kwargs)

        if self.stream is not None:
            self.logger.debug('unpacking \'%s\' from %s' % (self.__class__.__name__, self.stream))
            self.unpack(self.stream)

    def get_ordered_fields_name(self) -> List[str]:
        return self._meta.fields

    def get_fields(self) -> List[Tuple[str, Field]]:
        '''It returns a list of couples (name, instance) for each field.'''
        return [(_, getattr(self, _)) for _ in self.get_ordered_fields_name()]

    def __repr__(self):
        msg = []
        for field_name, field in self.get_fields():
            msg.append('%s=%s' % (field_name, repr(field)))
        return '<%s(%s)>' % (self.__class__.__name__, ','.join(msg))

    def __str__(self):
        msg = ''
        for field_name, field in self.get_fields():
            msg += '%s: %s\n' % (field_name, repr(field))
        return msg

    def init(self):
        self._value = None

    @property
    def root(self):
        '''Obtain the final father of this chunk'''
        return get_root_from_chunk(self)

    @property
    def isRoot(self):
        return self.root is self

    @property
    def phase(self) -> ChunkPhase:
        return self._phase

    def _get_size(self):
        '''the size is derived from the subchunks'''
        return sum(field.size for _, field in self.get_fields())

    @property
    def layout(self) -> Dict[str, Tuple[int, int]]:
        result = {}
        for name, field in self.get_fields():
            result[name] = (field.offset, field.size)

        return result

    def unpack(self, stream):
        '''This is one of the main APIs to take care of: its aim is to take a binary
        data and transform in the representation given by the class this method
        is implemented.

        Each sub-field starts where the previous one finished; a failure is
        re-raised with the name of the field appended to its chain.
        '''
        self._phase = ChunkPhase.UNPACKING
        self.offset = stream.tell()

        for field_name, field in self.get_fields():
            self.logger.debug('unpacking %s.%s at offset %d' % (self.__class__.__name__, field_name, stream.tell()))

            field.offset = stream.tell()

            try:
                field.unpack(stream)
            except ATCException as e:
                self._phase = ChunkPhase.ERROR
                e.chain.append(field_name)
                raise

        self._phase = ChunkPhase.DONE
