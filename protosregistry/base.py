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
from typing import Union, Optional

from scalecodec.base import ScaleBytes, ScaleType

from .exceptions import RegistryValidationError, ConfigurationError, RegistryStateError
from .methods import MethodRegistry, MethodDescriptor
from .presets import load_schema_preset
from .registry import TypeRegistry, RegistryState
from .resolved import ResolvedType
from .scale import ScaleCodec
from .schema import load_schema_file, schema_types, schema_methods
from .typeref import TypeRef
from .types import TypeDefinition

__all__ = ['Registry', 'logger']

logger = logging.getLogger(__name__)


class Registry:

    def __init__(self, schema: Optional[dict] = None, schema_preset: Optional[str] = None, auto_seal: bool = True,
                 validate_on_seal: bool = True, scale_type_registry_preset: Optional[str] = 'core'):
        """
        Process-wide registry of the types and custom RPC methods of a Substrate node. The registry is built once,
        sealed and read-only afterwards.

        Parameters
        ----------
        schema: A dict containing the schema in format: {'rpc': {'namespace': {'method': {...}}}, 'types': {...}}
        schema_preset: The name of a bundled schema, e.g. 'protos'
        auto_seal: When True the registry is sealed by the first resolution request
        validate_on_seal: When True sealing an invalid registry raises a RegistryValidationError
        scale_type_registry_preset: Name of the scalecodec preset that provides the base types for encoding
        """
        self.config = {
            'auto_seal': auto_seal,
            'validate_on_seal': validate_on_seal,
            'scale_type_registry_preset': scale_type_registry_preset
        }

        self.types = TypeRegistry(auto_seal=auto_seal)
        self.methods = MethodRegistry(self.types)

        self.__scale_codec = None

        if schema_preset is not None:
            self.load_schema(load_schema_preset(schema_preset))

        if schema is not None:
            self.load_schema(schema)

    @classmethod
    def from_json_file(cls, file_path: str, **kwargs) -> 'Registry':
        """
        Creates a Registry from a JSON schema file

        Parameters
        ----------
        file_path: str
        kwargs: see `Registry.__init__`

        Returns
        -------
        Registry
        """
        return cls(schema=load_schema_file(file_path), **kwargs)

    @staticmethod
    def debug_message(message: str):
        logger.debug(message)

    @property
    def state(self) -> str:
        return self.types.state

    @property
    def is_sealed(self) -> bool:
        return self.types.state == RegistryState.SEALED

    def load_schema(self, schema: dict):
        """
        Registers all types and RPC methods of given schema

        Parameters
        ----------
        schema: dict in format {'rpc': {...}, 'types': {...}}

        Returns
        -------

        """
        if type(schema) is not dict:
            raise ConfigurationError('Schema must be a dict')

        for name, definition in schema_types(schema):
            self.define(name, definition)

        for namespace, name, definition in schema_methods(schema):
            self.register_method(namespace, name, definition)

    def define(self, name: str, definition: Union[str, dict, TypeDefinition]) -> TypeDefinition:
        return self.types.define(name, definition)

    def register_method(self, namespace: str, name: str, definition: Union[dict, MethodDescriptor]) -> MethodDescriptor:
        return self.methods.register(namespace, name, definition)

    def validate(self) -> list:
        """
        Resolves all registered types and the parameter and result types of all RPC methods

        Returns
        -------
        list of `UnknownTypeError` and `CyclicTypeError` instances, empty when the registry is valid
        """
        return self.types.validate(extra_type_refs=self.methods.type_refs())

    def seal(self):
        """
        Transitions the registry from building to sealed state. When `validate_on_seal` is enabled the registry is
        validated first and a RegistryValidationError is raised if any type or method is invalid.

        Returns
        -------

        """
        if self.is_sealed:
            return

        if self.config['validate_on_seal']:
            errors = self.validate()
            if errors:
                self.debug_message(f'Registry validation failed with {len(errors)} error(s)')
                raise RegistryValidationError(errors) from errors[0]

        self.types.seal()

        self.debug_message(
            f'Registry sealed with {len(self.types)} types and {len(self.methods)} RPC methods'
        )

    def __ensure_sealed(self):
        if not self.is_sealed and self.config['auto_seal']:
            self.seal()

    def resolve(self, type_ref: Union[str, TypeRef]) -> ResolvedType:
        self.__ensure_sealed()
        return self.types.resolve(type_ref)

    def describe(self, name: str) -> MethodDescriptor:
        return self.methods.describe(name)

    def check_args(self, name: str, args: Union[list, tuple, Mapping]) -> list:
        """
        Checks the arguments of a RPC call, see `MethodRegistry.check_args()`

        Parameters
        ----------
        name: name of the RPC method, e.g. 'getProtos'
        args: positional list or mapping by parameter name

        Returns
        -------
        list of errors
        """
        self.__ensure_sealed()
        return self.methods.check_args(name, args)

    @property
    def scale_codec(self) -> ScaleCodec:
        if self.__scale_codec is None:
            self.__ensure_sealed()
            if not self.is_sealed:
                raise RegistryStateError('Registry must be sealed before SCALE objects can be created')
            self.debug_message('Creating SCALE runtime configuration')
            self.__scale_codec = ScaleCodec(
                self.types, type_registry_preset=self.config['scale_type_registry_preset']
            )
        return self.__scale_codec

    def create_scale_object(self, type_string: str, data: ScaleBytes = None, **kwargs) -> ScaleType:
        """
        Convenience method to create a SCALE object of type `type_string`

        Parameters
        ----------
        type_string: str Name of the type to create
        data: ScaleBytes Optional ScaleBytes to decode
        kwargs

        Returns
        -------
        ScaleType
        """
        return self.scale_codec.create_scale_object(type_string, data=data, **kwargs)

    def encode_scale(self, type_string, value) -> ScaleBytes:
        """
        Helper function to encode a value into SCALE-bytes for given type_string, enum variants can be provided by
        index or by name

        Parameters
        ----------
        type_string
        value

        Returns
        -------
        ScaleBytes
        """
        return self.scale_codec.encode(type_string, value)

    def decode_scale(self, type_string, scale_bytes, return_scale_obj=False):
        """
        Helper function to decode SCALE-bytes (e.g. 0x02000000) according to given type_string

        Parameters
        ----------
        type_string
        scale_bytes
        return_scale_obj: if True the SCALE object itself is returned, otherwise the serialized value of the object

        Returns
        -------

        """
        return self.scale_codec.decode(type_string, scale_bytes, return_scale_obj=return_scale_obj)
