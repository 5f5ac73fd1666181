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

from functools import wraps


def sealed_cache(maxsize=1024):
    """
    Per-instance cache for single-argument methods of objects with an `is_sealed` property. Results are only
    cached once the object is sealed, before that every call is passed through. The cache lives on the instance,
    so it is released together with it, and stops accepting new entries once `maxsize` entries are stored.
    """
    def decorator(f):
        attr_name = f'_{f.__name__}_cache'

        @wraps(f)
        def wrapper(self, arg):
            if not self.is_sealed:
                return f(self, arg)

            cache = self.__dict__.get(attr_name)
            if cache is None:
                cache = self.__dict__.setdefault(attr_name, {})

            try:
                return cache[arg]
            except KeyError:
                pass

            result = f(self, arg)

            if len(cache) < maxsize:
                cache[arg] = result

            return result

        def cache_size(self):
            return len(self.__dict__.get(attr_name, {}))

        def cache_clear(self):
            self.__dict__.pop(attr_name, None)

        wrapper.cache_size = cache_size
        wrapper.cache_clear = cache_clear
        return wrapper
    return decorator
