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


class ImmutableObject:
    """
    Base class of objects that become read-only once `_freeze()` is called at the end of their initialization
    """
    __frozen = False

    def _freeze(self):
        object.__setattr__(self, '_ImmutableObject__frozen', True)

    def __setattr__(self, key, value):
        if self.__frozen:
            raise AttributeError(f'{self.__class__.__name__} is immutable')
        super().__setattr__(key, value)

    def __delattr__(self, key):
        if self.__frozen:
            raise AttributeError(f'{self.__class__.__name__} is immutable')
        super().__delattr__(key)
