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

"""Core foundations shared by every promptkit component.

This package holds the data model, the error taxonomy and the ambient
infrastructure (logging, tracing, configuration, JSON encoding) that the
parser, registry, renderer and observability wrapper build on.
"""


def package_name() -> str:
    """Get the fully qualified package name.

    Returns:
        The string 'promptkit.core', which is the fully qualified package name.
    """
    return 'promptkit.core'


__all__ = ['package_name']
