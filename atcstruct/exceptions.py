class ATCException(Exception):
    '''Base class to extend in order to throw exception in atcstruct.

    Besides the message it carries the chain of the fields crossed
    while the exception propagated, the innermost first.
    '''

    def __init__(self, message='', chain=None):
        self.message = message
        self.chain = chain if chain is not None else []
        super().__init__(message)

    @property
    def path(self):
        return '.'.join(self.chain[::-1])

    def __str__(self):
        if not self.chain:
            return self.message

        return '%s (at %s)' % (self.message, self.path)


class FormatError(ATCException):
    '''The data doesn't follow the layout of the container.'''
    pass


class MagicException(FormatError):
    pass


class ChecksumError(ATCException):
    '''The checksum stored after a block doesn't match the one calculated.'''

    def __init__(self, expected, stored, chain=None):
        self.expected = expected
        self.stored = stored
        super().__init__(
            'Checksum does not match. Expected: [%d] Stored: [%d]' % (expected, stored),
            chain=chain,
        )
