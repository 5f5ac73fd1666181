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


def get_schema():

    return {
        'rpc': {
            'protos': {
                'getProtos': {
                    'description': 'this is the description', 'type': 'String',
                    'params': [
                        {'name': 'params', 'type': 'GetProtosParams'},
                        {'name': 'at', 'type': 'BlockHash', 'isOptional': True}
                    ]
                },
            }
        },
        'types': {
            'ShardsFormat': {
                '_enum': [
                    'edn',
                    'binary'
                ]
            },
            'AudioCategories': {
                '_enum': [
                    'oggFile',
                    'mp3File'
                ]
            },
            'ModelCategories': {
                '_enum': [
                    'gltfFile',
                    'sdf',
                    'physicsCollider'
                ]
            },
            'TextureCategories': {
                '_enum': [
                    'pngFile',
                    'jpgFile'
                ]
            },
            'VectorCategories': {
                '_enum': [
                    'svgFile',
                    'ttfFile'
                ]
            },
            'VideoCategories': {
                '_enum': [
                    'mkvFile',
                    'mp4File'
                ]
            },
            'TextCategories': {
                '_enum': [
                    'plain',
                    'json'
                ]
            },
            'BinaryCategories': {
                '_enum': [
                    'wasmProgram',
                    'wasmReactor',
                    'blendFile',
                    'onnxModel'
                ]
            },
            'ShardsScriptInfo': {
                'format': 'ShardsFormat',
                'requiring': 'Vec<ShardsTrait>',
                'implementing': 'Vec<ShardsTrait>'
            },
            'ShardsTrait': 'Vec<u16>',
            'Categories': {
                '_enum': {
                    'text': 'TextCategories',
                    'trait': 'Option<ShardsTrait>',
                    'shards': 'ShardsScriptInfo',
                    'audio': 'AudioCategories',
                    'texture': 'TextureCategories',
                    'vector': 'VectorCategories',
                    'video': 'VideoCategories',
                    'model': 'ModelCategories',
                    'binary': 'BinaryCategories'
                }
            },
            'BlockHash': 'Hash',
            'GetProtosParams': {
                'desc': 'bool',
                'from': 'u32',
                'limit': 'u32',
                'metadata_keys': 'Vec<String>',
                'owner': 'Option<AccountId>',
                'return_owners': 'bool',
                'categories': 'Vec<Categories>',
                'tags': 'Vec<String>',
                'available': 'Option<bool>',
                'exclude_tags': 'bool'
            }
        }
    }
