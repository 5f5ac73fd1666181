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
#
#  ss58.py

""" Validation of account identifiers, which can be provided as raw public key (32 bytes or hex string) or as
    SS58 encoded address, see https://docs.substrate.io/reference/address-formats/

"""
import re

from scalecodec.utils.ss58 import is_valid_ss58_address

from ..constants import HASH_LENGTH

HEX_HASH_PATTERN = re.compile(r'^0x[0-9a-fA-F]{%d}$' % (HASH_LENGTH * 2))


def is_valid_hash(value) -> bool:
    if type(value) is bytes:
        return len(value) == HASH_LENGTH
    if type(value) is str:
        return HEX_HASH_PATTERN.match(value) is not None
    return False


def is_valid_account_id(value) -> bool:
    """
    Checks if given value is a 32 bytes public key or a valid SS58 address of any format

    Parameters
    ----------
    value: bytes or str

    Returns
    -------
    bool
    """
    if is_valid_hash(value):
        return True

    if type(value) is str and not value.startswith('0x'):
        try:
            return is_valid_ss58_address(value)
        except ValueError:
            return False

    return False
