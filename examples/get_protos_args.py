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

from protosregistry import Registry


# import logging
# logging.basicConfig(level=logging.DEBUG)


registry = Registry(schema_preset='protos')

# Fail fast when the schema contains dangling or cyclic type references
registry.seal()

method = registry.describe('getProtos')

print(f"{method.rpc_name}: {method.description}")

for param in method.params:
    print(f"  {param.name}: {param.type}{' (optional)' if param.is_optional else ''}")

params = {
    'desc': True,
    'from': 0,
    'limit': 10,
    'metadata_keys': ['title'],
    'owner': '5GrwvaEF5zXb26Fz9rcQpDWS57CtERHpNehXCPcNoHGKutQY',
    'return_owners': True,
    'categories': [{'text': 'plain'}, {'binary': 'onnxModel'}],
    'tags': [],
    'available': None,
    'exclude_tags': False
}

errors = registry.check_args('getProtos', [params])

if errors:
    for error in errors:
        print("Invalid argument: ", error)
else:
    print("Arguments valid, SCALE encoded params: ", registry.encode_scale('GetProtosParams', params))
