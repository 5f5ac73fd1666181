# Python Protos Registry Library
#
# Copyright 2018-2024 Stichting Polkascan (Polkascan Foundation).
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
# http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

""" Fully expanded, immutable views of types as handed out by `TypeRegistry.resolve()`

"""

__all__ = ['ResolvedType', 'ResolvedPrimitive', 'ResolvedEnum', 'ResolvedStruct', 'ResolvedVec', 'ResolvedOption',
           'ResolvedCompact', 'ResolvedTuple', 'ResolvedArray']


class ResolvedType:
    kind = None
    __slots__ = ()

    def _key(self) -> tuple:
        raise NotImplementedError()

    def __eq__(self, other):
        return type(self) is type(other) and self._key() == other._key()

    def __hash__(self):
        return hash((self.kind,) + self._key())

    def __setattr__(self, key, value):
        raise AttributeError(f'{self.__class__.__name__} is immutable')

    def _init(self, **kwargs):
        for key, value in kwargs.items():
            object.__setattr__(self, key, value)

    def __repr__(self):
        return f'<{self.__class__.__name__}: {self}>'


class ResolvedPrimitive(ResolvedType):
    kind = 'primitive'
    __slots__ = ('name',)

    def __init__(self, name: str):
        self._init(name=name)

    def _key(self):
        return self.name,

    def __str__(self):
        return self.name


class ResolvedEnum(ResolvedType):
    """
    Enum with its variants in declaration order. `payloads` is None for simple enums, otherwise a tuple with the
    resolved payload type of each variant.
    """
    kind = 'enum'
    __slots__ = ('name', 'variants', 'payloads')

    def __init__(self, name: str, variants, payloads=None):
        self._init(name=name, variants=tuple(variants), payloads=None if payloads is None else tuple(payloads))

    @property
    def is_tagged(self) -> bool:
        return self.payloads is not None

    def _key(self):
        return self.name, self.variants, self.payloads

    def __str__(self):
        return self.name


class ResolvedStruct(ResolvedType):
    kind = 'struct'
    __slots__ = ('name', 'fields')

    def __init__(self, name: str, fields):
        self._init(name=name, fields=tuple(fields))

    @property
    def field_names(self) -> tuple:
        return tuple(field_name for field_name, _ in self.fields)

    def _key(self):
        return self.name, self.fields

    def __str__(self):
        return self.name


class ResolvedVec(ResolvedType):
    kind = 'vec'
    __slots__ = ('inner',)

    def __init__(self, inner: ResolvedType):
        self._init(inner=inner)

    def _key(self):
        return self.inner,

    def __str__(self):
        return f'Vec<{self.inner}>'


class ResolvedOption(ResolvedType):
    kind = 'option'
    __slots__ = ('inner',)

    def __init__(self, inner: ResolvedType):
        self._init(inner=inner)

    def _key(self):
        return self.inner,

    def __str__(self):
        return f'Option<{self.inner}>'


class ResolvedCompact(ResolvedType):
    kind = 'compact'
    __slots__ = ('inner',)

    def __init__(self, inner: ResolvedType):
        self._init(inner=inner)

    def _key(self):
        return self.inner,

    def __str__(self):
        return f'Compact<{self.inner}>'


class ResolvedTuple(ResolvedType):
    kind = 'tuple'
    __slots__ = ('elements',)

    def __init__(self, elements):
        self._init(elements=tuple(elements))

    def _key(self):
        return self.elements,

    def __str__(self):
        return '({})'.format(', '.join(str(element) for element in self.elements))


class ResolvedArray(ResolvedType):
    kind = 'array'
    __slots__ = ('element', 'length')

    def __init__(self, element: ResolvedType, length: int):
        self._init(element=element, length=length)

    def _key(self):
        return self.element, self.length

    def __str__(self):
        return f'[{self.element}; {self.length}]'


GENERIC_RESOLVED_TYPES = {
    'Vec': ResolvedVec,
    'Option': ResolvedOption,
    'Compact': ResolvedCompact
}
