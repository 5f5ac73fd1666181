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

""" Loading of declarative schemas in the polkadot.js `{'rpc': {...}, 'types': {...}}` format

"""
from scalecodec.type_registry import load_type_registry_file

from .exceptions import ConfigurationError

__all__ = ['load_schema_file', 'schema_types', 'schema_methods']


def load_schema_file(file_path: str) -> dict:
    """
    Loads a schema from a JSON file

    Parameters
    ----------
    file_path: str

    Returns
    -------
    dict
    """
    schema = load_type_registry_file(file_path)

    if type(schema) is not dict:
        raise ConfigurationError(f"Schema file '{file_path}' must contain an object")

    return schema


def schema_types(schema: dict) -> list:
    """
    Returns list of (name, definition) tuples of the 'types' section, in declaration order
    """
    types = schema.get('types') or {}

    if type(types) is not dict:
        raise ConfigurationError("Schema section 'types' must be a mapping")

    return list(types.items())


def schema_methods(schema: dict) -> list:
    """
    Returns list of (namespace, name, definition) tuples of the 'rpc' section, in declaration order
    """
    rpc = schema.get('rpc') or {}

    if type(rpc) is not dict:
        raise ConfigurationError("Schema section 'rpc' must be a mapping")

    methods = []

    for namespace, namespace_methods in rpc.items():
        if type(namespace_methods) is not dict:
            raise ConfigurationError(f"RPC namespace '{namespace}' must be a mapping of methods")

        for name, definition in namespace_methods.items():
            if type(definition) is not dict or 'type' not in definition:
                raise ConfigurationError(f"RPC method '{namespace}_{name}' requires a 'type'")
            methods.append((namespace, name, definition))

    return methods
