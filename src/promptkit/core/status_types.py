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

"""Status codes used to classify prompt engine failures.

The names follow the canonical gRPC status space so the orchestration layer
can map a failure onto an HTTP response without inspecting message strings.
"""

from enum import IntEnum
from typing import Literal


class StatusCodes(IntEnum):
    """Enumeration of status codes raised by the engine."""

    # Not an error.
    #
    # HTTP Mapping: 200 OK
    OK = 0

    # Unknown error, typically wrapped from a collaborator that did not
    # provide enough information.
    #
    # HTTP Mapping: 500 Internal Server Error
    UNKNOWN = 2

    # The caller supplied something malformed regardless of engine state:
    # a broken prompt document, a bad prompt key or an input that fails its
    # schema.
    #
    # HTTP Mapping: 400 Bad Request
    INVALID_ARGUMENT = 3

    # A prompt or schema is not registered.
    #
    # HTTP Mapping: 404 Not Found
    NOT_FOUND = 5

    # The request cannot be served in the current state, e.g. a prompt is
    # rendered without all of its required inputs.
    #
    # HTTP Mapping: 400 Bad Request
    FAILED_PRECONDITION = 9

    # Invariant broken inside the engine.
    #
    # HTTP Mapping: 500 Internal Server Error
    INTERNAL = 13


# Type alias for status names
StatusName = Literal[
    'OK',
    'UNKNOWN',
    'INVALID_ARGUMENT',
    'NOT_FOUND',
    'FAILED_PRECONDITION',
    'INTERNAL',
]

# Mapping of status names to HTTP status codes
_STATUS_CODE_MAP: dict[StatusName, int] = {
    'OK': 200,
    'UNKNOWN': 500,
    'INVALID_ARGUMENT': 400,
    'NOT_FOUND': 404,
    'FAILED_PRECONDITION': 400,
    'INTERNAL': 500,
}


def http_status_code(status: StatusName) -> int:
    """Gets the HTTP status code for a given status name.

    Args:
        status: The status name to get the HTTP code for.

    Returns:
        The corresponding HTTP status code.
    """
    return _STATUS_CODE_MAP[status]
