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

import os
import unittest

from protosregistry import Registry, RegistryState
from protosregistry.exceptions import RegistryValidationError, RegistryStateError, CyclicTypeError, \
    UnknownTypeError, ConfigurationError, RegistrySealedError
from protosregistry.presets import load_schema_preset
from protosregistry.resolved import ResolvedPrimitive


class RegistryPresetTestCase(unittest.TestCase):

    def test_preset_and_json_file_equal(self):
        preset_registry = Registry(schema_preset='protos')
        file_registry = Registry.from_json_file(
            os.path.join(os.path.dirname(__file__), 'fixtures', 'protos_schema.json')
        )

        self.assertEqual(preset_registry.describe('getProtos'), file_registry.describe('getProtos'))

        for name in preset_registry.types.type_names():
            self.assertEqual(preset_registry.resolve(name), file_registry.resolve(name))

    def test_preset_valid(self):
        self.assertEqual(Registry(schema_preset='protos').validate(), [])

    def test_unknown_preset(self):
        with self.assertRaises(ValueError):
            Registry(schema_preset='kusama')

    def test_preset_returns_copy(self):
        schema = load_schema_preset('protos')
        schema['types']['BlockHash'] = 'u32'
        self.assertEqual(load_schema_preset('protos')['types']['BlockHash'], 'Hash')

    def test_schema_merges_with_preset(self):
        registry = Registry(schema_preset='protos', schema={'types': {'ProtoHash': 'BlockHash'}})
        self.assertEqual(registry.resolve('ProtoHash'), ResolvedPrimitive('Hash'))

    def test_duplicate_identical_definition_in_second_schema(self):
        registry = Registry(schema_preset='protos', schema={'types': {'ShardsFormat': {'_enum': ['edn', 'binary']}}})
        self.assertEqual(len(registry.types.resolve('ShardsFormat').variants), 2)


class RegistryLifecycleTestCase(unittest.TestCase):

    def test_auto_seal_on_resolve(self):
        registry = Registry(schema={'types': {'TestType': 'u8'}})
        self.assertEqual(registry.state, RegistryState.BUILDING)

        registry.resolve('TestType')

        self.assertEqual(registry.state, RegistryState.SEALED)

        with self.assertRaises(RegistrySealedError):
            registry.define('OtherType', 'u16')

    def test_explicit_seal(self):
        registry = Registry(schema={'types': {'TestType': 'u8'}}, auto_seal=False)

        with self.assertRaises(RegistryStateError):
            registry.resolve('TestType')

        registry.seal()
        registry.seal()

        self.assertTrue(registry.is_sealed)
        self.assertEqual(registry.resolve('TestType'), ResolvedPrimitive('u8'))

    def test_seal_fails_fast_on_invalid_registry(self):
        registry = Registry(schema={
            'rpc': {'protos': {'getProto': {'type': 'ProtoResult', 'params': []}}},
            'types': {'A': 'B', 'B': 'A'}
        })

        with self.assertRaises(RegistryValidationError) as cm:
            registry.seal()

        self.assertFalse(registry.is_sealed)
        self.assertEqual(len(cm.exception.errors), 3)
        self.assertEqual(
            sorted(type(e).__name__ for e in cm.exception.errors),
            ['CyclicTypeError', 'CyclicTypeError', 'UnknownTypeError']
        )

    def test_auto_seal_fails_fast(self):
        registry = Registry(schema={'types': {'Dangling': 'Vec<Missing>', 'Valid': 'u8'}})

        with self.assertRaises(RegistryValidationError):
            registry.resolve('Valid')

    def test_auto_seal_failure_exposes_cause(self):
        registry = Registry(schema={'types': {'A': 'B', 'B': 'A'}})

        with self.assertRaises(RegistryValidationError) as cm:
            registry.resolve('A')

        self.assertIsInstance(cm.exception.first_error, CyclicTypeError)
        self.assertIs(cm.exception.__cause__, cm.exception.first_error)
        self.assertEqual(cm.exception.first_error.path, ['A', 'B', 'A'])
        self.assertFalse(registry.is_sealed)

    def test_seal_without_validation(self):
        registry = Registry(schema={'types': {'A': 'A', 'Valid': 'u8'}}, validate_on_seal=False)

        self.assertEqual(registry.resolve('Valid'), ResolvedPrimitive('u8'))

        with self.assertRaises(CyclicTypeError):
            registry.resolve('A')

    def test_validate_includes_methods(self):
        registry = Registry(schema={
            'rpc': {'protos': {'getProto': {'type': 'u8', 'params': [{'name': 'id', 'type': 'ProtoId'}]}}}
        })
        errors = registry.validate()
        self.assertEqual(len(errors), 1)
        self.assertIsInstance(errors[0], UnknownTypeError)

    def test_invalid_schema(self):
        with self.assertRaises(ConfigurationError):
            Registry(schema=['types'])

        with self.assertRaises(ConfigurationError):
            Registry(schema={'rpc': {'protos': {'getProto': {'params': []}}}})

        with self.assertRaises(ConfigurationError):
            Registry(schema={'types': ['ShardsFormat']})


if __name__ == '__main__':
    unittest.main()
