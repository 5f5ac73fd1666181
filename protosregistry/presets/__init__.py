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

from . import protos

SCHEMA_PRESETS = {
    'protos': protos.get_schema
}


def load_schema_preset(name: str) -> dict:
    """
    Returns a copy of the bundled schema with given name, e.g. 'protos'

    Parameters
    ----------
    name: str

    Returns
    -------
    dict
    """
    try:
        return SCHEMA_PRESETS[name]()
    except KeyError:
        raise ValueError(f"Schema preset '{name}' not found")
