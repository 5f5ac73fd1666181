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


class RegistryError(Exception):
    pass


class DuplicateTypeError(RegistryError):
    pass


class UnknownTypeError(RegistryError):
    pass


class CyclicTypeError(RegistryError):

    def __init__(self, path):
        self.path = list(path)
        super().__init__('Cyclic type reference: {}'.format(' -> '.join(self.path)))


class DuplicateMethodError(RegistryError):
    pass


class UnknownMethodError(RegistryError):
    pass


class ArityMismatchError(RegistryError):
    pass


class ShapeMismatchError(RegistryError):

    def __init__(self, message, path=None):
        self.path = path
        if path:
            message = f'{path}: {message}'
        super().__init__(message)


class TypeStringParseError(RegistryError, ValueError):
    pass


class RegistryStateError(RegistryError):
    pass


class RegistrySealedError(RegistryStateError):
    pass


class RegistryValidationError(RegistryError):

    def __init__(self, errors):
        self.errors = list(errors)
        super().__init__(
            'Registry validation failed with {} error(s): {}'.format(
                len(self.errors), '; '.join(str(e) for e in self.errors)
            )
        )

    @property
    def first_error(self):
        """
        The first error found during validation, also set as `__cause__` when raised by `Registry.seal()`
        """
        return self.errors[0] if self.errors else None


class ConfigurationError(RegistryError):
    pass
