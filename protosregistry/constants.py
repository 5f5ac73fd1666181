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

PRIMITIVE_TYPES = (
    'bool',
    'u8', 'u16', 'u32', 'u64', 'u128',
    'i8', 'i16', 'i32', 'i64', 'i128',
    'String', 'Text', 'Bytes',
    'Hash', 'H256',
    'AccountId',
    'Null'
)

# Generic wrapper name -> number of type arguments
GENERIC_WRAPPERS = {
    'Vec': 1,
    'Option': 1,
    'Compact': 1
}

INTEGER_BITS = {
    'u8': 8, 'u16': 16, 'u32': 32, 'u64': 64, 'u128': 128,
    'i8': 8, 'i16': 16, 'i32': 32, 'i64': 64, 'i128': 128
}

# Primitive name -> type string understood by scalecodec
SCALE_PRIMITIVE_TYPES = {
    'bool': 'bool',
    'u8': 'u8',
    'u16': 'u16',
    'u32': 'u32',
    'u64': 'u64',
    'u128': 'u128',
    'i8': 'i8',
    'i16': 'i16',
    'i32': 'i32',
    'i64': 'i64',
    'i128': 'i128',
    'String': 'String',
    'Text': 'String',
    'Bytes': 'Bytes',
    'Hash': 'H256',
    'H256': 'H256',
    'AccountId': 'GenericAccountId',
    'Null': 'Null'
}

ENUM_KEY = '_enum'
STRUCT_FIELD_TYPE_KEYS = ('Type', 'type')

HASH_LENGTH = 32

RESOLVE_CACHE_SIZE = 1024
