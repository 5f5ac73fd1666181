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

from concurrent.futures import ThreadPoolExecutor

from protosregistry import Registry

# Built and sealed once, afterwards shared between threads without locking
registry = Registry(schema_preset='protos')
registry.seal()


def resolve_type(type_string):
    return type_string, registry.resolve(type_string)


with ThreadPoolExecutor(max_workers=4) as executor:
    for type_string, resolved in executor.map(resolve_type, registry.types.type_names()):
        print(f"{type_string} -> {resolved.kind}")
