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

""" Type references as found in a polkadot.js style type registry, e.g. `u32`, `Vec<ShardsTrait>`,
    `Option<AccountId>`, `(u32, u16)` or `[u8; 32]`, and the recursive-descent parser that produces them.

"""
from typing import Union

from .constants import PRIMITIVE_TYPES, GENERIC_WRAPPERS
from .exceptions import TypeStringParseError

__all__ = ['TypeRef', 'PrimitiveRef', 'NamedRef', 'GenericRef', 'TupleRef', 'ArrayRef', 'parse_type_string',
           'to_type_ref']


class TypeRef:
    """
    Base class of all type references. Instances are immutable and compare by value.
    """
    __slots__ = ()

    def _key(self) -> tuple:
        raise NotImplementedError()

    def named_refs(self) -> list:
        """
        Returns all names of user defined types this reference depends on, in order of appearance
        """
        return []

    def __eq__(self, other):
        return type(self) is type(other) and self._key() == other._key()

    def __hash__(self):
        return hash((type(self).__name__,) + self._key())

    def __repr__(self):
        return f'<{self.__class__.__name__}: {self}>'


class PrimitiveRef(TypeRef):
    __slots__ = ('name',)

    def __init__(self, name: str):
        self.name = name

    def _key(self):
        return self.name,

    def __str__(self):
        return self.name


class NamedRef(TypeRef):
    __slots__ = ('name',)

    def __init__(self, name: str):
        self.name = name

    def _key(self):
        return self.name,

    def named_refs(self):
        return [self.name]

    def __str__(self):
        return self.name


class GenericRef(TypeRef):
    __slots__ = ('name', 'args')

    def __init__(self, name: str, args):
        self.name = name
        self.args = tuple(args)

    def _key(self):
        return self.name, self.args

    def named_refs(self):
        names = []
        for arg in self.args:
            names += arg.named_refs()
        return names

    def __str__(self):
        return '{}<{}>'.format(self.name, ', '.join(str(arg) for arg in self.args))


class TupleRef(TypeRef):
    __slots__ = ('elements',)

    def __init__(self, elements):
        self.elements = tuple(elements)

    def _key(self):
        return self.elements,

    def named_refs(self):
        names = []
        for element in self.elements:
            names += element.named_refs()
        return names

    def __str__(self):
        return '({})'.format(', '.join(str(element) for element in self.elements))


class ArrayRef(TypeRef):
    __slots__ = ('element', 'length')

    def __init__(self, element: TypeRef, length: int):
        self.element = element
        self.length = length

    def _key(self):
        return self.element, self.length

    def named_refs(self):
        return self.element.named_refs()

    def __str__(self):
        return f'[{self.element}; {self.length}]'


class TypeStringParser:
    """
    Recursive-descent parser for the type reference grammar:

        TypeRef := Ident ('<' TypeRef (',' TypeRef)* '>')?
                 | '(' (TypeRef (',' TypeRef)*)? ')'
                 | '[' TypeRef ';' Number ']'

    Whitespace between tokens is ignored.
    """

    def __init__(self, type_string: str):
        self.type_string = type_string
        self.position = 0

    def error(self, message: str):
        raise TypeStringParseError(
            f"Invalid type string '{self.type_string}' at position {self.position}: {message}"
        )

    def skip_whitespace(self):
        while self.position < len(self.type_string) and self.type_string[self.position].isspace():
            self.position += 1

    def peek(self) -> str:
        self.skip_whitespace()
        if self.position < len(self.type_string):
            return self.type_string[self.position]
        return ''

    def expect(self, char: str):
        if self.peek() != char:
            self.error(f"expected '{char}'")
        self.position += 1

    def read_while(self, predicate) -> str:
        self.skip_whitespace()
        start = self.position
        while self.position < len(self.type_string) and predicate(self.type_string[self.position]):
            self.position += 1
        return self.type_string[start:self.position]

    def parse(self) -> TypeRef:
        type_ref = self.parse_type_ref()
        if self.peek() != '':
            self.error('unexpected trailing characters')
        return type_ref

    def parse_type_ref(self) -> TypeRef:
        char = self.peek()

        if char == '(':
            return self.parse_tuple()
        if char == '[':
            return self.parse_array()
        if char == '':
            self.error('unexpected end of type string')

        name = self.read_while(lambda c: c.isalnum() or c == '_')
        if not name or name[0].isdigit():
            self.error('expected identifier')

        if self.peek() == '<':
            self.position += 1
            args = self.parse_list('>')
            arity = GENERIC_WRAPPERS.get(name)
            if arity is not None and len(args) != arity:
                self.error(f"'{name}' expects {arity} type argument(s), {len(args)} given")
            return GenericRef(name, args)

        if name in PRIMITIVE_TYPES:
            return PrimitiveRef(name)

        return NamedRef(name)

    def parse_list(self, closing: str) -> list:
        items = [self.parse_type_ref()]
        while self.peek() == ',':
            self.position += 1
            items.append(self.parse_type_ref())
        self.expect(closing)
        return items

    def parse_tuple(self) -> TypeRef:
        self.expect('(')
        if self.peek() == ')':
            self.position += 1
            return PrimitiveRef('Null')
        return TupleRef(self.parse_list(')'))

    def parse_array(self) -> TypeRef:
        self.expect('[')
        element = self.parse_type_ref()
        self.expect(';')
        length = self.read_while(str.isdigit)
        if not length:
            self.error('expected array length')
        self.expect(']')
        return ArrayRef(element, int(length))


def parse_type_string(type_string: str) -> TypeRef:
    """
    Parses a type string like `Vec<Option<AccountId>>` into a `TypeRef`

    Parameters
    ----------
    type_string: str

    Returns
    -------
    TypeRef
    """
    if type(type_string) is not str:
        raise TypeStringParseError(f"Type string must be a str, not {type(type_string).__name__}")

    return TypeStringParser(type_string).parse()


def to_type_ref(type_ref: Union[str, TypeRef]) -> TypeRef:
    if isinstance(type_ref, TypeRef):
        return type_ref
    return parse_type_string(type_ref)
