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

import gc
import unittest
import weakref

from protosregistry import TypeRegistry, RegistryState
from protosregistry.constants import RESOLVE_CACHE_SIZE
from protosregistry.exceptions import DuplicateTypeError, UnknownTypeError, CyclicTypeError, RegistrySealedError, \
    RegistryStateError
from protosregistry.presets import load_schema_preset
from protosregistry.resolved import ResolvedPrimitive, ResolvedEnum, ResolvedStruct, ResolvedVec, ResolvedOption, \
    ResolvedTuple, ResolvedArray
from protosregistry.types import EnumType


class ProtosTypeRegistryTestCase(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        cls.type_registry = TypeRegistry()
        for name, definition in load_schema_preset('protos')['types'].items():
            cls.type_registry.define(name, definition)
        cls.type_registry.seal()

    def test_all_types_resolve_idempotent(self):
        for name in self.type_registry.type_names():
            with self.subTest(name=name):
                self.assertEqual(self.type_registry.resolve(name), self.type_registry.resolve(name))

    def test_validate_empty(self):
        self.assertEqual(self.type_registry.validate(), [])

    def test_resolve_primitive(self):
        self.assertEqual(self.type_registry.resolve('u32'), ResolvedPrimitive('u32'))

    def test_resolve_alias(self):
        self.assertEqual(self.type_registry.resolve('BlockHash'), ResolvedPrimitive('Hash'))
        self.assertEqual(self.type_registry.resolve('ShardsTrait'), ResolvedVec(ResolvedPrimitive('u16')))

    def test_resolve_simple_enum(self):
        resolved = self.type_registry.resolve('ShardsFormat')
        self.assertEqual(resolved, ResolvedEnum('ShardsFormat', ['edn', 'binary']))
        self.assertFalse(resolved.is_tagged)

    def test_resolve_tagged_enum(self):
        resolved = self.type_registry.resolve('Categories')
        self.assertTrue(resolved.is_tagged)
        self.assertEqual(
            resolved.variants,
            ('text', 'trait', 'shards', 'audio', 'texture', 'vector', 'video', 'model', 'binary')
        )
        self.assertEqual(resolved.payloads[1], ResolvedOption(ResolvedVec(ResolvedPrimitive('u16'))))
        self.assertEqual(resolved.payloads[2].kind, 'struct')

    def test_resolve_struct_field_order(self):
        resolved = self.type_registry.resolve('GetProtosParams')
        self.assertEqual(resolved.field_names, (
            'desc', 'from', 'limit', 'metadata_keys', 'owner', 'return_owners', 'categories', 'tags', 'available',
            'exclude_tags'
        ))
        self.assertEqual(dict(resolved.fields)['owner'], ResolvedOption(ResolvedPrimitive('AccountId')))

    def test_resolve_generics(self):
        self.assertEqual(
            self.type_registry.resolve('(ShardsFormat, [u8; 4])'),
            ResolvedTuple([ResolvedEnum('ShardsFormat', ['edn', 'binary']), ResolvedArray(ResolvedPrimitive('u8'), 4)])
        )

    def test_resolved_types_immutable(self):
        resolved = self.type_registry.resolve('GetProtosParams')
        with self.assertRaises(AttributeError):
            resolved.name = 'Other'

    def test_unknown_type(self):
        with self.assertRaises(UnknownTypeError):
            self.type_registry.resolve('X')

        with self.assertRaises(UnknownTypeError):
            self.type_registry.resolve('Vec<X>')

    def test_unknown_generic(self):
        with self.assertRaises(UnknownTypeError):
            self.type_registry.resolve('BTreeSet<u32>')

    def test_define_after_seal(self):
        with self.assertRaises(RegistrySealedError):
            self.type_registry.define('NewType', 'u32')

    def test_definitions_are_read_only(self):
        type_def = self.type_registry.get_definition('ShardsFormat')

        with self.assertRaises(AttributeError):
            type_def.variants = ('edn',)

        with self.assertRaises(AttributeError):
            self.type_registry.get_definition('GetProtosParams').fields = ()

        with self.assertRaises(AttributeError):
            self.type_registry.get_definition('BlockHash').type_ref = 'u8'

        self.assertEqual(type_def.index_of('binary'), 1)
        self.assertEqual(len(self.type_registry.resolve('ShardsFormat').variants), 2)


class TypeRegistryDefineTestCase(unittest.TestCase):

    def setUp(self) -> None:
        self.type_registry = TypeRegistry()

    def test_initial_state(self):
        self.assertEqual(self.type_registry.state, RegistryState.BUILDING)

    def test_define_identical_is_noop(self):
        first = self.type_registry.define('ShardsFormat', {'_enum': ['edn', 'binary']})
        second = self.type_registry.define('ShardsFormat', {'_enum': ['edn', 'binary']})
        self.assertIs(first, second)
        self.assertEqual(len(self.type_registry), 1)

    def test_define_conflicting(self):
        self.type_registry.define('TestType', 'u8')
        with self.assertRaises(DuplicateTypeError):
            self.type_registry.define('TestType', 'u16')

    def test_define_builtin(self):
        with self.assertRaises(DuplicateTypeError):
            self.type_registry.define('u32', 'u16')

    def test_define_type_definition(self):
        self.type_registry.define('Format', EnumType('Format', ['edn', 'binary']))
        self.assertEqual(self.type_registry.resolve('Format'), ResolvedEnum('Format', ['edn', 'binary']))

    def test_struct_field_forms_equivalent(self):
        self.type_registry.define('Short', {'a': 'u32', 'b': 'Vec<u8>'})
        self.type_registry.define('Long', {'a': {'Type': 'u32'}, 'b': {'type': 'Vec<u8>'}})

        self.assertEqual(self.type_registry.resolve('Short').fields, self.type_registry.resolve('Long').fields)

    def test_resolve_auto_seals(self):
        self.type_registry.define('TestType', 'u8')
        self.type_registry.resolve('TestType')
        self.assertTrue(self.type_registry.is_sealed)

    def test_resolve_without_auto_seal(self):
        type_registry = TypeRegistry(auto_seal=False)
        type_registry.define('TestType', 'u8')

        with self.assertRaises(RegistryStateError):
            type_registry.resolve('TestType')

        type_registry.seal()
        self.assertEqual(type_registry.resolve('TestType'), ResolvedPrimitive('u8'))

    def test_cyclic_alias(self):
        self.type_registry.define('A', 'B')
        self.type_registry.define('B', 'A')

        with self.assertRaises(CyclicTypeError) as cm:
            self.type_registry.resolve('A')

        self.assertEqual(cm.exception.path, ['A', 'B', 'A'])

    def test_cyclic_struct(self):
        self.type_registry.define('Tree', {'value': 'u32', 'children': 'Vec<Tree>'})

        with self.assertRaises(CyclicTypeError):
            self.type_registry.resolve('Tree')

    def test_shared_reference_is_not_cyclic(self):
        self.type_registry.define('Leaf', 'u32')
        self.type_registry.define('Pair', {'left': 'Leaf', 'right': 'Leaf'})
        self.assertEqual(self.type_registry.validate(), [])

    def test_validate_collects_all_errors(self):
        self.type_registry.define('A', 'B')
        self.type_registry.define('B', 'A')
        self.type_registry.define('Dangling', {'value': 'Missing'})
        self.type_registry.define('Valid', 'u32')

        errors = self.type_registry.validate()

        self.assertEqual(len(errors), 3)
        self.assertEqual(len([e for e in errors if type(e) is CyclicTypeError]), 2)
        self.assertEqual(len([e for e in errors if type(e) is UnknownTypeError]), 1)

    def test_validate_does_not_seal(self):
        self.type_registry.define('Valid', 'u32')
        self.type_registry.validate()
        self.assertFalse(self.type_registry.is_sealed)

    def test_dependency_order(self):
        self.type_registry.define('Outer', {'inner': 'Inner', 'alias': 'Alias'})
        self.type_registry.define('Alias', 'Vec<Inner>')
        self.type_registry.define('Inner', {'_enum': ['a', 'b']})

        order = self.type_registry.dependency_order()

        self.assertLess(order.index('Inner'), order.index('Alias'))
        self.assertLess(order.index('Alias'), order.index('Outer'))


class TypeRegistryCacheTestCase(unittest.TestCase):

    def test_no_cache_before_seal(self):
        type_registry = TypeRegistry()
        type_registry.define('TestType', 'u8')
        type_registry.validate()

        self.assertEqual(TypeRegistry.resolve.cache_size(type_registry), 0)

    def test_cache_per_instance(self):
        first = TypeRegistry()
        first.define('TestType', 'u8')
        second = TypeRegistry()
        second.define('TestType', 'u16')

        self.assertEqual(first.resolve('TestType'), ResolvedPrimitive('u8'))
        self.assertEqual(second.resolve('TestType'), ResolvedPrimitive('u16'))
        self.assertIs(first.resolve('TestType'), first.resolve('TestType'))
        self.assertEqual(TypeRegistry.resolve.cache_size(first), 1)
        self.assertEqual(TypeRegistry.resolve.cache_size(second), 1)

    def test_cache_is_bounded(self):
        type_registry = TypeRegistry()
        type_registry.seal()

        for length in range(RESOLVE_CACHE_SIZE + 10):
            type_registry.resolve(f'[u8; {length}]')

        self.assertEqual(TypeRegistry.resolve.cache_size(type_registry), RESOLVE_CACHE_SIZE)
        self.assertEqual(
            type_registry.resolve(f'[u8; {RESOLVE_CACHE_SIZE + 5}]'),
            ResolvedArray(ResolvedPrimitive('u8'), RESOLVE_CACHE_SIZE + 5)
        )

    def test_sealed_registry_is_released(self):
        type_registry = TypeRegistry()
        for name, definition in load_schema_preset('protos')['types'].items():
            type_registry.define(name, definition)
        type_registry.resolve('GetProtosParams')
        self.assertTrue(type_registry.is_sealed)

        ref = weakref.ref(type_registry)
        del type_registry
        gc.collect()

        self.assertIsNone(ref())


if __name__ == '__main__':
    unittest.main()
