import logging
from enum import Enum, auto

from .exceptions import FormatError


class ChunkPhase(Enum):
    '''Enum to state the actual phase of a chunk'''
    INIT      = 0
    UNPACKING = auto()
    DONE      = auto()
    ERROR     = auto()


def get_root_from_chunk(instance):
    while instance.father is not None:
        instance = instance.father

    return instance


class Dependency:
    '''This makes the relation between fields possible.

    In practice this class allows to write something like

        class Simple(Chunk):
            length = fields.StructField('I')
            data = fields.StringField(Dependency('.length'))

    and have the length of the string contained in the field named 'data'
    read from the field named 'length' at the moment of the unpacking.

    The syntax for the expression is inspired from relative imports: the
    leading '.' stands for the father of the field and each component after
    it is an attribute, like '.header.length'.
    '''
    def __init__(self, expression):
        if not expression.startswith('.'):
            raise ValueError(f'\'{expression}\' must start with a \'.\'')

        self.expression = expression
        self.logger = logging.getLogger(__name__)

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.expression})>'

    def resolve_field(self, instance):
        self.logger.debug('trying to resolve \'%s\' for \'%s\'' % (
            self.expression,
            instance.__class__.__name__,
        ))

        # '.header.length'.split(".") -> ['', 'header', 'length']
        fields_path = self.expression.split('.')[1:]
        field = instance.father

        if field is None:
            raise AttributeError(f'cannot resolve \'{self.expression}\' for a field without a father')

        for component_name in fields_path:
            field = getattr(field, component_name)

        self.logger.debug(' resolved as field %s' % field.__class__.__name__)

        return field

    def resolve(self, instance):
        '''With this method we resolve the attribute with respect to the instance
        passed as argument.'''
        value = self.resolve_field(instance).value

        self.logger.debug(' resolved with value %s' % value)

        return value


class RatioDependency(Dependency):
    '''Resolves to the referenced value divided by a ratio, e.g. a count of
    elements from a size in bytes. A remainder is a format error.'''

    def __init__(self, ratio, expression):
        super().__init__(expression)
        self._ratio = ratio

    def resolve(self, instance):
        value = super().resolve(instance)

        if value % self._ratio:
            raise FormatError(f'\'{self.expression}\' is {value} that is not a multiple of {self._ratio}')

        return value // self._ratio


class PropertyDescriptor(object):
    """Attribute of a field that can be a plain value or a Dependency
    resolved each time it's accessed."""

    def __init__(self, name: str, _type: type):
        self.name = name
        self.type = _type

    def __get__(self, instance, owner):
        if instance is None:
            return self

        data = instance.__dict__
        if self.name not in data:
            raise AttributeError(f"no '{self.name}' here!")

        value = data[self.name]

        if isinstance(value, Dependency):
            return value.resolve(instance)

        return value

    def __set__(self, instance, value):
        if not isinstance(value, (self.type, Dependency)):
            raise ValueError(f"A property must be of type {self.type} or a Dependency")

        instance.__dict__[self.name] = value
