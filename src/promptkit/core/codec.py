# Copyright 2025 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#
# SPDX-License-Identifier: Apache-2.0

"""Functions for serializing engine records to JSON."""

import json
from typing import Any

from pydantic import BaseModel
from pydantic_core import to_jsonable_python


def dump_dict(obj: Any) -> Any:
    """Converts an object to a dictionary if it is a Pydantic model.

    For any other object type, it returns the object unchanged.

    Args:
        obj: The object to potentially convert to a dictionary.

    Returns:
        A dictionary if the input is a Pydantic BaseModel, otherwise the original object.
    """
    if isinstance(obj, BaseModel):
        return obj.model_dump(exclude_none=True, by_alias=True, mode='json')
    else:
        return obj


def dump_json(obj: Any, indent=None) -> str:
    """Dumps an object to a JSON string.

    If the object is a Pydantic BaseModel, it will be dumped using the
    model_dump_json method using the by_alias flag set to True.  Otherwise, the
    object will be dumped using the json.dumps method.

    Args:
        obj: The object to dump.

    Returns:
        A JSON string.
    """
    if isinstance(obj, BaseModel):
        return obj.model_dump_json(by_alias=True, exclude_none=True, indent=indent)
    else:
        return json.dumps(obj, indent=indent, default=to_jsonable)


def dump_canonical_json(obj: Any) -> str:
    """Dumps an object to compact JSON with sorted keys.

    Two mappings holding the same data serialize identically regardless of
    insertion order, which makes the output suitable for hashing.
    """
    return json.dumps(dump_dict(obj), sort_keys=True, separators=(',', ':'), default=to_jsonable)


def to_jsonable(obj: Any) -> Any:
    """`json.dumps` fallback for values the json module cannot encode.

    Models are dumped the same way as `dump_dict`; dates, UUIDs, decimals,
    sets and other types pydantic knows are converted to JSON-native values;
    anything else falls back to its string form.
    Sets are emitted sorted so equal sets encode identically.
    """
    if isinstance(obj, BaseModel):
        return dump_dict(obj)
    if isinstance(obj, set | frozenset):
        return sorted(to_jsonable_python(obj, serialize_unknown=True), key=lambda item: json.dumps(item, sort_keys=True))
    return to_jsonable_python(obj, serialize_unknown=True)
