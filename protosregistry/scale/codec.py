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

""" Bridge between a sealed `TypeRegistry` and the scalecodec library, which performs the actual SCALE encoding
    and decoding based on a generated type registry

"""
import logging
from collections.abc import Mapping

from scalecodec.base import RuntimeConfigurationObject, ScaleBytes, ScaleType
from scalecodec.type_registry import load_type_registry_preset

from ..constants import SCALE_PRIMITIVE_TYPES
from ..exceptions import ConfigurationError
from ..resolved import ResolvedType
from ..shape import check_value
from ..typeref import PrimitiveRef, NamedRef, GenericRef, TupleRef, ArrayRef, to_type_ref
from ..types import AliasType, EnumType, StructType

__all__ = ['ScaleCodec', 'scale_type_string', 'generate_scale_type_registry', 'to_scale_value']

logger = logging.getLogger(__name__)


def scale_type_string(type_ref) -> str:
    """
    Converts a type reference into the equivalent scalecodec type string, e.g. 'Option<AccountId>' into
    'Option<GenericAccountId>'
    """
    type_ref = to_type_ref(type_ref)

    if type(type_ref) is PrimitiveRef:
        return SCALE_PRIMITIVE_TYPES[type_ref.name]

    if type(type_ref) is NamedRef:
        return type_ref.name

    if type(type_ref) is GenericRef:
        return '{}<{}>'.format(type_ref.name, ', '.join(scale_type_string(arg) for arg in type_ref.args))

    if type(type_ref) is TupleRef:
        return '({})'.format(', '.join(scale_type_string(element) for element in type_ref.elements))

    if type(type_ref) is ArrayRef:
        return f'[{scale_type_string(type_ref.element)}; {type_ref.length}]'

    raise ValueError(f'Unsupported type reference {type_ref!r}')


def generate_scale_type_registry(type_registry) -> dict:
    """
    Generates a scalecodec type registry dict in format {'types': {...}} for all types of given `TypeRegistry`.
    Types are emitted after the types they reference, because scalecodec resolves aliases at registration.

    Parameters
    ----------
    type_registry: TypeRegistry

    Returns
    -------
    dict
    """
    types = {}
    lowercase_names = {}

    for name in type_registry.dependency_order():

        if name.lower() in lowercase_names:
            raise ConfigurationError(
                f"Type names '{lowercase_names[name.lower()]}' and '{name}' collide in case-insensitive SCALE registry"
            )
        lowercase_names[name.lower()] = name

        type_def = type_registry.get_definition(name)

        if type(type_def) is AliasType:
            types[name] = scale_type_string(type_def.type_ref)

        elif type(type_def) is EnumType:
            if type_def.is_tagged:
                types[name] = {
                    'type': 'enum',
                    'type_mapping': [
                        [variant, scale_type_string(payload)]
                        for variant, payload in zip(type_def.variants, type_def.payload_types)
                    ]
                }
            else:
                types[name] = {'type': 'enum', 'value_list': list(type_def.variants)}

        elif type(type_def) is StructType:
            types[name] = {
                'type': 'struct',
                'type_mapping': [[field_name, scale_type_string(field_type)] for field_name, field_type in type_def.fields]
            }

        else:
            raise ValueError(f'Unsupported type definition {type_def!r}')

    return {'types': types}


def to_scale_value(resolved: ResolvedType, value):
    """
    Converts a value that passed the shape check into the representation scalecodec expects: enum indexes become
    variant names, tagged enum pairs become {variant: payload} and raw bytes become hex strings
    """
    kind = resolved.kind

    if kind == 'primitive':
        if type(value) in (bytes, bytearray):
            return '0x' + bytes(value).hex()
        return value

    if kind == 'enum':
        if not resolved.is_tagged:
            if type(value) is int:
                return resolved.variants[value]
            return value

        if isinstance(value, Mapping):
            variant, payload = list(value.items())[0]
        else:
            variant, payload = value

        index = variant if type(variant) is int else resolved.variants.index(variant)
        return {resolved.variants[index]: to_scale_value(resolved.payloads[index], payload)}

    if kind == 'struct':
        return {field_name: to_scale_value(field_type, value[field_name]) for field_name, field_type in resolved.fields}

    if kind == 'option':
        if value is None:
            return None
        return to_scale_value(resolved.inner, value)

    if kind == 'compact':
        return to_scale_value(resolved.inner, value)

    if kind in ('vec', 'array'):
        if type(value) in (bytes, bytearray):
            return '0x' + bytes(value).hex()
        if type(value) is str:
            return value
        element = resolved.inner if kind == 'vec' else resolved.element
        return [to_scale_value(element, item) for item in value]

    if kind == 'tuple':
        return tuple(to_scale_value(element, item) for element, item in zip(resolved.elements, value))

    raise ValueError(f'Unsupported resolved type {resolved!r}')


class ScaleCodec:

    def __init__(self, type_registry, type_registry_preset: str = 'core'):
        """
        SCALE encoder/decoder for the types of a sealed `TypeRegistry`

        Parameters
        ----------
        type_registry: TypeRegistry, will be sealed if not already
        type_registry_preset: name of the scalecodec preset providing the base types
        """
        type_registry.seal()

        self.type_registry = type_registry
        self.runtime_config = RuntimeConfigurationObject()

        if type_registry_preset:
            logger.debug(f"Loading scalecodec type registry preset '{type_registry_preset}'")
            self.runtime_config.update_type_registry(load_type_registry_preset(name=type_registry_preset))

        self.runtime_config.update_type_registry(generate_scale_type_registry(type_registry))

    def create_scale_object(self, type_ref, data: ScaleBytes = None, **kwargs) -> ScaleType:
        """
        Creates a scalecodec object for given type

        Parameters
        ----------
        type_ref: type string or `TypeRef`, e.g. 'GetProtosParams'
        data: Optional ScaleBytes to decode
        kwargs

        Returns
        -------
        ScaleType
        """
        # Resolving first so unknown or cyclic types fail with registry errors
        self.type_registry.resolve(type_ref)

        return self.runtime_config.create_scale_object(scale_type_string(type_ref), data=data, **kwargs)

    def encode(self, type_ref, value) -> ScaleBytes:
        resolved = self.type_registry.resolve(type_ref)

        errors = check_value(resolved, value)
        if errors:
            raise errors[0]

        obj = self.runtime_config.create_scale_object(scale_type_string(type_ref))
        return obj.encode(to_scale_value(resolved, value))

    def decode(self, type_ref, scale_bytes, return_scale_obj: bool = False):
        if type(scale_bytes) in (str, bytes, bytearray):
            scale_bytes = ScaleBytes(scale_bytes)

        obj = self.create_scale_object(type_ref, data=scale_bytes)
        obj.decode()

        if return_scale_obj:
            return obj

        return obj.value
