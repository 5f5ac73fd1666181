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

""" Static shape checks of runtime Python values against resolved types

"""
import re
from collections.abc import Mapping

from .constants import INTEGER_BITS
from .exceptions import ShapeMismatchError
from .resolved import ResolvedType, ResolvedPrimitive
from .utils.ss58 import is_valid_hash, is_valid_account_id

__all__ = ['check_value']

HEX_PATTERN = re.compile(r'^0x([0-9a-fA-F]{2})*$')
RESOLVED_U8 = ResolvedPrimitive('u8')


def _describe(value) -> str:
    return f'{type(value).__name__} {value!r}'


def _join(path: str, item) -> str:
    if type(item) is int:
        return f'{path}[{item}]'
    return f'{path}.{item}' if path else item


def check_primitive(name: str, value, path: str) -> list:

    if name in INTEGER_BITS:
        if type(value) is not int:
            return [ShapeMismatchError(f'expected {name}, got {_describe(value)}', path)]

        bits = INTEGER_BITS[name]
        if name.startswith('u'):
            lower, upper = 0, 2 ** bits - 1
        else:
            lower, upper = -2 ** (bits - 1), 2 ** (bits - 1) - 1

        if not lower <= value <= upper:
            return [ShapeMismatchError(f'{value} out of range for {name}', path)]
        return []

    if name == 'bool':
        valid = type(value) is bool
    elif name in ('String', 'Text'):
        valid = type(value) is str
    elif name == 'Bytes':
        valid = type(value) in (bytes, bytearray) or (type(value) is str and HEX_PATTERN.match(value) is not None)
    elif name in ('Hash', 'H256'):
        valid = is_valid_hash(value)
    elif name == 'AccountId':
        valid = is_valid_account_id(value)
    elif name == 'Null':
        valid = value is None
    else:
        raise ValueError(f"Unsupported primitive '{name}'")

    if not valid:
        return [ShapeMismatchError(f'expected {name}, got {_describe(value)}', path)]

    return []


def check_enum(resolved: ResolvedType, value, path: str) -> list:

    if not resolved.is_tagged:
        if type(value) is int:
            if 0 <= value < len(resolved.variants):
                return []
            return [ShapeMismatchError(
                f"index {value} out of range for enum '{resolved.name}' with {len(resolved.variants)} variants", path
            )]
        if type(value) is str and value in resolved.variants:
            return []
        return [ShapeMismatchError(f"{_describe(value)} is not a variant of enum '{resolved.name}'", path)]

    if isinstance(value, Mapping) and len(value) == 1:
        variant, payload = list(value.items())[0]
    elif type(value) in (list, tuple) and len(value) == 2:
        variant, payload = value
    else:
        return [ShapeMismatchError(
            f"expected {{variant: payload}} or (variant, payload) for enum '{resolved.name}', got {_describe(value)}",
            path
        )]

    if type(variant) is int and 0 <= variant < len(resolved.variants):
        index = variant
    elif type(variant) is str and variant in resolved.variants:
        index = resolved.variants.index(variant)
    else:
        return [ShapeMismatchError(f"{_describe(variant)} is not a variant of enum '{resolved.name}'", path)]

    return check_value(resolved.payloads[index], payload, _join(path, resolved.variants[index]))


def check_struct(resolved: ResolvedType, value, path: str) -> list:

    if not isinstance(value, Mapping):
        return [ShapeMismatchError(f"expected struct '{resolved.name}', got {_describe(value)}", path)]

    errors = []

    for field_name, field_type in resolved.fields:
        if field_name not in value:
            errors.append(ShapeMismatchError(f"missing field '{field_name}' of '{resolved.name}'", path))
        else:
            errors += check_value(field_type, value[field_name], _join(path, field_name))

    for field_name in value:
        if field_name not in resolved.field_names:
            errors.append(ShapeMismatchError(f"unknown field '{field_name}' for '{resolved.name}'", path))

    return errors


def check_sequence(element_types: list, value, path: str) -> list:
    errors = []
    for idx, (element_type, element) in enumerate(zip(element_types, value)):
        errors += check_value(element_type, element, _join(path, idx))
    return errors


def check_value(resolved: ResolvedType, value, path: str = '') -> list:
    """
    Checks if given value matches the shape of the resolved type

    Parameters
    ----------
    resolved: ResolvedType
    value: runtime value, e.g. `{'desc': True, 'from': 0, ...}` for a struct
    path: location of the value used in error messages, e.g. 'params.categories[0]'

    Returns
    -------
    list of `ShapeMismatchError`, empty when value matches
    """
    kind = resolved.kind

    if kind == 'primitive':
        return check_primitive(resolved.name, value, path)

    if kind == 'enum':
        return check_enum(resolved, value, path)

    if kind == 'struct':
        return check_struct(resolved, value, path)

    if kind == 'option':
        if value is None:
            return []
        return check_value(resolved.inner, value, path)

    if kind == 'compact':
        return check_value(resolved.inner, value, path)

    if kind == 'vec':
        if type(value) not in (list, tuple):
            if resolved.inner == RESOLVED_U8 and type(value) in (bytes, bytearray, str):
                return check_primitive('Bytes', value, path)
            return [ShapeMismatchError(f'expected {resolved}, got {_describe(value)}', path)]
        return check_sequence([resolved.inner] * len(value), value, path)

    if kind == 'tuple':
        if type(value) not in (list, tuple) or len(value) != len(resolved.elements):
            return [ShapeMismatchError(f'expected tuple {resolved}, got {_describe(value)}', path)]
        return check_sequence(resolved.elements, value, path)

    if kind == 'array':
        if resolved.element == RESOLVED_U8 and type(value) in (bytes, bytearray, str):
            errors = check_primitive('Bytes', value, path)
            if errors:
                return errors
            length = len(value) if type(value) is not str else (len(value) - 2) // 2
            if length != resolved.length:
                return [ShapeMismatchError(f'expected {resolved.length} bytes, got {length}', path)]
            return []

        if type(value) not in (list, tuple) or len(value) != resolved.length:
            return [ShapeMismatchError(f'expected {resolved}, got {_describe(value)}', path)]
        return check_sequence([resolved.element] * resolved.length, value, path)

    raise ValueError(f"Unsupported resolved type {resolved!r}")
