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
from collections.abc import Mapping
from typing import Union, TYPE_CHECKING

from .exceptions import DuplicateMethodError, UnknownMethodError, ArityMismatchError, RegistrySealedError, \
    UnknownTypeError, CyclicTypeError
from .shape import check_value
from .typeref import TypeRef, to_type_ref
from .utils import ImmutableObject

if TYPE_CHECKING:
    from .registry import TypeRegistry

__all__ = ['ParamDescriptor', 'MethodDescriptor', 'MethodRegistry']

logger = logging.getLogger(__name__)


class ParamDescriptor(ImmutableObject):

    def __init__(self, name: str, type_ref: Union[str, TypeRef], is_optional: bool = False):
        self.name = name
        self.type = to_type_ref(type_ref)
        self.is_optional = bool(is_optional)
        self._freeze()

    @classmethod
    def from_dict(cls, value: dict) -> 'ParamDescriptor':
        return cls(name=value['name'], type_ref=value['type'], is_optional=value.get('isOptional', False))

    def to_dict(self) -> dict:
        value = {'name': self.name, 'type': str(self.type)}
        if self.is_optional:
            value['isOptional'] = True
        return value

    def __eq__(self, other):
        return type(self) is type(other) and \
            (self.name, self.type, self.is_optional) == (other.name, other.type, other.is_optional)

    def __hash__(self):
        return hash((self.name, self.type, self.is_optional))

    def __repr__(self):
        return f'<ParamDescriptor: {self.name}: {self.type}{"?" if self.is_optional else ""}>'


class MethodDescriptor(ImmutableObject):
    """
    Describes the shape of a custom RPC method: its parameters in call order and the type of its result
    """

    def __init__(self, namespace: str, name: str, type_ref: Union[str, TypeRef], params: list = None,
                 description: str = None):
        self.namespace = namespace
        self.name = name
        self.type = to_type_ref(type_ref)
        self.params = tuple(params or [])
        self.description = description
        self._freeze()

    @classmethod
    def from_dict(cls, namespace: str, name: str, value: dict) -> 'MethodDescriptor':
        return cls(
            namespace=namespace,
            name=name,
            type_ref=value['type'],
            params=[ParamDescriptor.from_dict(param) for param in value.get('params', [])],
            description=value.get('description')
        )

    @property
    def rpc_name(self) -> str:
        return f'{self.namespace}_{self.name}'

    @property
    def min_args(self) -> int:
        required = [idx for idx, param in enumerate(self.params) if not param.is_optional]
        if not required:
            return 0
        return required[-1] + 1

    @property
    def max_args(self) -> int:
        return len(self.params)

    def to_dict(self) -> dict:
        return {
            'description': self.description,
            'type': str(self.type),
            'params': [param.to_dict() for param in self.params]
        }

    def __eq__(self, other):
        return type(self) is type(other) and \
            (self.rpc_name, self.type, self.params, self.description) == \
            (other.rpc_name, other.type, other.params, other.description)

    def __hash__(self):
        return hash((self.rpc_name, self.type, self.params))

    def __repr__(self):
        return f'<MethodDescriptor: {self.rpc_name}>'


class MethodRegistry:

    def __init__(self, type_registry: 'TypeRegistry'):
        self.type_registry = type_registry
        self.__methods = {}

    def register(self, namespace: str, name: str, definition: Union[dict, MethodDescriptor]) -> MethodDescriptor:
        """
        Registers a RPC method descriptor, e.g. namespace 'protos' and name 'getProtos'

        Parameters
        ----------
        namespace: RPC namespace
        name: method name within namespace
        definition: dict in format {'description': ..., 'type': ..., 'params': [{'name': ..., 'type': ...}]}

        Returns
        -------
        MethodDescriptor
        """
        if self.type_registry.is_sealed:
            raise RegistrySealedError(f"Cannot register method '{namespace}_{name}', registry is sealed")

        if isinstance(definition, MethodDescriptor):
            method = definition
        else:
            method = MethodDescriptor.from_dict(namespace, name, definition)

        if (method.namespace, method.name) != (namespace, name):
            raise ValueError(f"Descriptor of '{method.rpc_name}' cannot be registered as '{namespace}_{name}'")

        existing = self.__methods.get(method.rpc_name)
        if existing is not None:
            if existing == method:
                return existing
            raise DuplicateMethodError(f"RPC method '{method.rpc_name}' already registered with a different definition")

        self.__methods[method.rpc_name] = method
        logger.debug(f"Registered RPC method '{method.rpc_name}'")

        return method

    def method_names(self) -> list:
        return list(self.__methods.keys())

    def __iter__(self):
        return iter(self.__methods.values())

    def __len__(self):
        return len(self.__methods)

    def describe(self, name: str) -> MethodDescriptor:
        """
        Retrieves the descriptor of a method by its RPC name ('protos_getProtos'), dotted name ('protos.getProtos')
        or, when unambiguous, bare name ('getProtos')

        Parameters
        ----------
        name: str

        Returns
        -------
        MethodDescriptor
        """
        if name in self.__methods:
            return self.__methods[name]

        if '.' in name:
            rpc_name = name.replace('.', '_', 1)
            if rpc_name in self.__methods:
                return self.__methods[rpc_name]

        candidates = [method for method in self.__methods.values() if method.name == name]

        if len(candidates) == 1:
            return candidates[0]

        if len(candidates) > 1:
            raise UnknownMethodError(
                f"RPC method '{name}' is ambiguous: {', '.join(m.rpc_name for m in candidates)}"
            )

        raise UnknownMethodError(f"RPC method '{name}' not found")

    def type_refs(self) -> list:
        """
        All (description, type_ref) tuples of method results and parameters
        """
        type_refs = []
        for method in self.__methods.values():
            type_refs.append((f'{method.rpc_name} result', method.type))
            for param in method.params:
                type_refs.append((f'{method.rpc_name}.{param.name}', param.type))
        return type_refs

    def check_args(self, name: str, args: Union[list, tuple, Mapping]) -> list:
        """
        Validates the arguments of a RPC call against the method descriptor. Only shapes are checked, the call is
        not performed.

        Parameters
        ----------
        name: name of the method, see `describe()`
        args: positional list of arguments or mapping by parameter name

        Returns
        -------
        list of `ArityMismatchError` and `ShapeMismatchError` instances, empty when arguments are valid
        """
        method = self.describe(name)

        if isinstance(args, Mapping):
            unknown = [key for key in args if key not in [param.name for param in method.params]]
            if unknown:
                return [ArityMismatchError(
                    f"Unknown parameter(s) {', '.join(unknown)} for RPC method '{method.rpc_name}'"
                )]

            missing = [param.name for param in method.params if not param.is_optional and param.name not in args]
            if missing:
                return [ArityMismatchError(
                    f"Missing required parameter(s) {', '.join(missing)} for RPC method '{method.rpc_name}'"
                )]

            pairs = [(param, args[param.name]) for param in method.params if param.name in args]

        elif type(args) in (list, tuple):
            if not method.min_args <= len(args) <= method.max_args:
                return [ArityMismatchError(
                    f"RPC method '{method.rpc_name}' expects {method.min_args} to {method.max_args} "
                    f"arguments, {len(args)} given"
                )]
            pairs = list(zip(method.params, args))

        else:
            raise TypeError('args must be a list, tuple or mapping')

        errors = []

        for param, value in pairs:
            if value is None and param.is_optional:
                continue
            try:
                resolved = self.type_registry.resolve(param.type)
            except (UnknownTypeError, CyclicTypeError) as e:
                errors.append(e)
                continue
            errors += check_value(resolved, value, param.name)

        return errors
