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
from types import MappingProxyType
from typing import Union, Optional

from .constants import ENUM_KEY, STRUCT_FIELD_TYPE_KEYS
from .exceptions import ShapeMismatchError, TypeStringParseError
from .typeref import TypeRef, to_type_ref
from .utils import ImmutableObject

__all__ = ['TypeDefinition', 'AliasType', 'EnumType', 'StructType', 'create_type_definition']


class TypeDefinition(ImmutableObject):
    """
    Base class of all named type definitions stored in the `TypeRegistry`. Definitions are read-only once
    constructed.
    """

    def __init__(self, name: str):
        self.name = name

    def type_refs(self) -> list:
        """
        All type references this definition depends on, in declaration order
        """
        return []

    def _key(self) -> tuple:
        raise NotImplementedError()

    def __eq__(self, other):
        return type(self) is type(other) and self.name == other.name and self._key() == other._key()

    def __hash__(self):
        return hash((type(self).__name__, self.name) + self._key())

    def __repr__(self):
        return f'<{self.__class__.__name__}: {self.name}>'


class AliasType(TypeDefinition):

    def __init__(self, name: str, type_ref: Union[str, TypeRef]):
        super().__init__(name)
        self.type_ref = to_type_ref(type_ref)
        self._freeze()

    def type_refs(self):
        return [self.type_ref]

    def _key(self):
        return self.type_ref,


class EnumType(TypeDefinition):
    """
    Enumeration of a fixed, ordered list of variants. A simple enum has bare variants, a tagged enum carries a
    payload type per variant. The discriminant of a variant is its position in the declaration.
    """

    def __init__(self, name: str, variants: list, payload_types: Optional[list] = None):
        super().__init__(name)

        self.variants = tuple(variants)

        if len(set(self.variants)) != len(self.variants):
            raise ValueError(f"Enum '{name}' contains duplicate variant names")

        if payload_types is None:
            self.payload_types = None
        else:
            if len(payload_types) != len(self.variants):
                raise ValueError(f"Enum '{name}' requires a payload type for every variant")
            self.payload_types = tuple(to_type_ref(t) for t in payload_types)

        self.__index_lookup = MappingProxyType({variant: idx for idx, variant in enumerate(self.variants)})
        self._freeze()

    @classmethod
    def from_mapping(cls, name: str, mapping: dict) -> 'EnumType':
        return cls(name, list(mapping.keys()), list(mapping.values()))

    @property
    def is_tagged(self) -> bool:
        return self.payload_types is not None

    def __len__(self):
        return len(self.variants)

    def index_of(self, variant: str) -> int:
        try:
            return self.__index_lookup[variant]
        except (KeyError, TypeError):
            raise ShapeMismatchError(f"'{variant}' is not a variant of enum '{self.name}'")

    def name_of(self, index: int) -> str:
        if type(index) is not int or not 0 <= index < len(self.variants):
            raise ShapeMismatchError(
                f"Index {index} out of range for enum '{self.name}' with {len(self.variants)} variants"
            )
        return self.variants[index]

    def to_index(self, value: Union[int, str]) -> int:
        """
        Converts a variant given as index or as name into its canonical index

        Parameters
        ----------
        value: index (0-based) or exact variant name

        Returns
        -------
        int
        """
        if type(value) is int:
            self.name_of(value)
            return value
        return self.index_of(value)

    def payload_type(self, variant: Union[int, str]) -> Optional[TypeRef]:
        if not self.is_tagged:
            return None
        return self.payload_types[self.to_index(variant)]

    def type_refs(self):
        return list(self.payload_types or [])

    def _key(self):
        return self.variants, self.payload_types


class StructType(TypeDefinition):
    """
    Named, ordered list of fields. The order of fields is significant for positional encoding.
    """

    def __init__(self, name: str, fields: list):
        super().__init__(name)
        self.fields = tuple((field_name, to_type_ref(type_ref)) for field_name, type_ref in fields)

        if len(set(self.field_names)) != len(self.fields):
            raise ValueError(f"Struct '{name}' contains duplicate field names")

        self._freeze()

    @classmethod
    def from_mapping(cls, name: str, mapping: dict) -> 'StructType':
        return cls(name, [(field_name, normalize_field_type(name, field_name, field_type))
                          for field_name, field_type in mapping.items()])

    @property
    def field_names(self) -> tuple:
        return tuple(field_name for field_name, _ in self.fields)

    def field_type(self, field_name: str) -> TypeRef:
        for name, type_ref in self.fields:
            if name == field_name:
                return type_ref
        raise KeyError(field_name)

    def type_refs(self):
        return [type_ref for _, type_ref in self.fields]

    def _key(self):
        return self.fields,


def normalize_field_type(struct_name: str, field_name: str, field_type) -> Union[str, TypeRef]:
    # Both `{"Type": "u32"}` and `"u32"` are accepted as field definition
    if type(field_type) is dict:
        for key in STRUCT_FIELD_TYPE_KEYS:
            if key in field_type and len(field_type) == 1:
                return field_type[key]
        raise TypeStringParseError(f"Unsupported definition for field '{struct_name}.{field_name}': {field_type}")
    return field_type


def create_type_definition(name: str, definition) -> TypeDefinition:
    """
    Creates a `TypeDefinition` from a schema fragment, which is either a type string (alias), a dict containing an
    `_enum` key (a list for simple enums, a dict for tagged enums) or a dict of fields (struct)

    Parameters
    ----------
    name: name of the type
    definition: schema fragment or `TypeDefinition`

    Returns
    -------
    TypeDefinition
    """
    if isinstance(definition, TypeDefinition):
        if definition.name != name:
            raise ValueError(f"Definition of '{definition.name}' cannot be registered as '{name}'")
        return definition

    if type(definition) is str or isinstance(definition, TypeRef):
        return AliasType(name, definition)

    if type(definition) is dict:
        if ENUM_KEY in definition:
            if len(definition) != 1:
                raise ValueError(f"Enum '{name}' cannot contain other keys than '{ENUM_KEY}'")

            enum_def = definition[ENUM_KEY]

            if type(enum_def) is list:
                return EnumType(name, enum_def)
            if type(enum_def) is dict:
                return EnumType.from_mapping(name, enum_def)

            raise ValueError(f"Unsupported '{ENUM_KEY}' definition for '{name}'")

        return StructType.from_mapping(name, definition)

    raise ValueError(f"Unsupported type definition for '{name}': {definition!r}")
