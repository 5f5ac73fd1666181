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

import logging
from typing import Union, Optional

from .constants import PRIMITIVE_TYPES, GENERIC_WRAPPERS, RESOLVE_CACHE_SIZE
from .exceptions import DuplicateTypeError, UnknownTypeError, CyclicTypeError, RegistrySealedError, \
    RegistryStateError
from .resolved import ResolvedType, ResolvedPrimitive, ResolvedEnum, ResolvedStruct, ResolvedTuple, ResolvedArray, \
    GENERIC_RESOLVED_TYPES
from .typeref import TypeRef, PrimitiveRef, NamedRef, GenericRef, TupleRef, ArrayRef, to_type_ref
from .types import TypeDefinition, AliasType, EnumType, StructType, create_type_definition
from .utils.caching import sealed_cache

__all__ = ['TypeRegistry', 'RegistryState']

logger = logging.getLogger(__name__)


class RegistryState:
    """
    Lifecycle state of a registry

    * BUILDING = 'building': definitions can be added
    * SEALED = 'sealed': read-only, only lookups and resolution

    """
    BUILDING = 'building'
    SEALED = 'sealed'


class TypeRegistry:

    def __init__(self, auto_seal: bool = True):
        """
        Registry of named type definitions (aliases, enums and structs) that resolves type references into
        `ResolvedType` trees

        Parameters
        ----------
        auto_seal: When True the first call to `resolve()` seals the registry, otherwise resolving before `seal()`
        raises a `RegistryStateError`
        """
        self.auto_seal = auto_seal
        self.state = RegistryState.BUILDING
        self.__definitions = {}

    @property
    def is_sealed(self) -> bool:
        return self.state == RegistryState.SEALED

    def seal(self):
        if not self.is_sealed:
            logger.debug(f'Sealing type registry with {len(self.__definitions)} types')
            self.state = RegistryState.SEALED

    def define(self, name: str, definition: Union[str, dict, TypeDefinition]) -> TypeDefinition:
        """
        Registers a type definition under given name. Registering an identical definition again is a no-op.

        Parameters
        ----------
        name: Name of the type, e.g. 'GetProtosParams'
        definition: type string (alias), `{'_enum': [...]}`, `{'_enum': {...}}`, dict of fields or `TypeDefinition`

        Returns
        -------
        TypeDefinition
        """
        if self.is_sealed:
            raise RegistrySealedError(f"Cannot define type '{name}', registry is sealed")

        if name in PRIMITIVE_TYPES or name in GENERIC_WRAPPERS:
            raise DuplicateTypeError(f"'{name}' is a builtin type and cannot be redefined")

        type_def = create_type_definition(name, definition)

        existing = self.__definitions.get(name)

        if existing is not None:
            if existing == type_def:
                logger.debug(f"Type '{name}' already defined with identical definition")
                return existing
            raise DuplicateTypeError(f"Type '{name}' already defined with a different definition")

        self.__definitions[name] = type_def
        logger.debug(f"Defined type '{name}' as {type_def.__class__.__name__}")

        return type_def

    def get_definition(self, name: str) -> TypeDefinition:
        try:
            return self.__definitions[name]
        except KeyError:
            raise UnknownTypeError(f"Type '{name}' not found in registry")

    def type_names(self) -> list:
        return list(self.__definitions.keys())

    def __contains__(self, name):
        return name in self.__definitions

    def __len__(self):
        return len(self.__definitions)

    @sealed_cache(maxsize=RESOLVE_CACHE_SIZE)
    def resolve(self, type_ref: Union[str, TypeRef]) -> ResolvedType:
        """
        Expands given type reference into a `ResolvedType`. Names are replaced by their definitions and generics
        by structural nodes wrapping their resolved arguments.

        Parameters
        ----------
        type_ref: type string like 'Vec<Categories>' or a `TypeRef`

        Returns
        -------
        ResolvedType
        """
        if not self.is_sealed:
            if not self.auto_seal:
                raise RegistryStateError('Type registry must be sealed before types can be resolved')
            self.seal()

        return self._resolve(to_type_ref(type_ref), ())

    def _resolve(self, type_ref: TypeRef, path: tuple) -> ResolvedType:

        if type(type_ref) is PrimitiveRef:
            return ResolvedPrimitive(type_ref.name)

        if type(type_ref) is NamedRef:
            return self._resolve_named(type_ref.name, path)

        if type(type_ref) is GenericRef:
            resolved_cls = GENERIC_RESOLVED_TYPES.get(type_ref.name)
            if resolved_cls is None:
                raise UnknownTypeError(f"Unknown generic type '{type_ref.name}' in '{type_ref}'")
            return resolved_cls(*[self._resolve(arg, path) for arg in type_ref.args])

        if type(type_ref) is TupleRef:
            return ResolvedTuple([self._resolve(element, path) for element in type_ref.elements])

        if type(type_ref) is ArrayRef:
            return ResolvedArray(self._resolve(type_ref.element, path), type_ref.length)

        raise ValueError(f'Unsupported type reference {type_ref!r}')

    def _resolve_named(self, name: str, path: tuple) -> ResolvedType:

        if name in path:
            raise CyclicTypeError(path[path.index(name):] + (name,))

        if name not in self.__definitions:
            if path:
                raise UnknownTypeError(f"Type '{name}' not found in registry (referenced by '{path[-1]}')")
            raise UnknownTypeError(f"Type '{name}' not found in registry")

        type_def = self.__definitions[name]
        path = path + (name,)

        if type(type_def) is AliasType:
            return self._resolve(type_def.type_ref, path)

        if type(type_def) is EnumType:
            if type_def.is_tagged:
                return ResolvedEnum(
                    name, type_def.variants, [self._resolve(payload, path) for payload in type_def.payload_types]
                )
            return ResolvedEnum(name, type_def.variants)

        if type(type_def) is StructType:
            return ResolvedStruct(
                name, [(field_name, self._resolve(field_type, path)) for field_name, field_type in type_def.fields]
            )

        raise ValueError(f"Unsupported type definition {type_def!r}")

    def validate(self, extra_type_refs: Optional[list] = None) -> list:
        """
        Resolves every registered type (and optionally additional type references) and collects all errors
        instead of stopping at the first one

        Parameters
        ----------
        extra_type_refs: list of (description, type_ref) tuples to validate as well, e.g. method parameters

        Returns
        -------
        list of `UnknownTypeError` and `CyclicTypeError` instances, empty when registry is valid
        """
        errors = []

        candidates = [(name, NamedRef(name)) for name in self.__definitions]
        candidates += list(extra_type_refs or [])

        for description, type_ref in candidates:
            try:
                self._resolve(to_type_ref(type_ref), ())
            except (UnknownTypeError, CyclicTypeError) as e:
                logger.debug(f"Validation of '{description}' failed: {e}")
                errors.append(e)

        return errors

    def dependency_order(self) -> list:
        """
        Returns all type names ordered so that every type comes after the types it references. Types that are
        part of a cycle or reference unknown types are appended last.
        """
        ordered = []
        visited = set()

        def visit(name, stack):
            if name in visited or name in stack or name not in self.__definitions:
                return
            stack.add(name)
            for type_ref in self.__definitions[name].type_refs():
                for ref_name in type_ref.named_refs():
                    visit(ref_name, stack)
            stack.discard(name)
            visited.add(name)
            ordered.append(name)

        for name in self.__definitions:
            visit(name, set())

        return ordered
