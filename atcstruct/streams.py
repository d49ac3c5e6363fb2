import io
import logging


logger = logging.getLogger(__name__)


class Stream(object):
    '''This is a simple wrapper around the data to decode: the whole
    content is kept in memory so that it's possible to look back at
    bytes already consumed (checksums are calculated this way) while
    the cursor moves only forward during the unpacking.'''
    def __init__(self, obj):
        self._type = type(obj)
        self.obj = obj

        init_method_name = 'init_%s' % self.obj.__class__.__name__

        init_method = getattr(self, init_method_name, None)

        if init_method is None:
            raise ValueError('\'%s\' is the wrong kind of object to stream' % self._type.__name__)

        init_method()

    def __repr__(self):
        return '<%s(%d bytes @ %d)>' % (self.__class__.__name__, len(self._buffer), self.tell())

    def __getattr__(self, name):
        return getattr(self.obj, name)

    def init_str(self):
        '''We think this is a path'''
        logger.debug('opening path \'%s\'' % self.obj)
        with open(self.obj, 'rb') as f:
            self._buffer = f.read()
        self.obj = io.BytesIO(self._buffer)

    def init_bytes(self):
        '''We think these are raw bytes'''
        self._buffer = self.obj
        self.obj = io.BytesIO(self._buffer)

    def init_bytearray(self):
        # take a copy, nothing decoded must alias the caller's buffer
        self._buffer = bytes(self.obj)
        self.obj = io.BytesIO(self._buffer)

    init_memoryview = init_bytearray

    def seek(self, offset):
        if not isinstance(offset, int):
            raise ValueError('\'%s\' is the wrong kind of offset to use' % offset.__class__.__name__)

        self.obj.seek(offset)

    def remaining(self):
        return len(self._buffer) - self.obj.tell()

    def at_eof(self):
        return self.remaining() <= 0

    def view(self):
        '''Read-only access to the whole underlying data, independently
        of the position of the cursor.'''
        return memoryview(self._buffer)
