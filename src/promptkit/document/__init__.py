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

"""Prompt document handling: frontmatter metadata plus two template sections."""

from promptkit.document.metadata import parse_inline_array, parse_metadata, parse_scalar
from promptkit.document.parser import (
    FRONTMATTER_DELIMITER,
    Frontmatter,
    Sections,
    extract_frontmatter,
    parse_prompt_document,
    split_sections,
)

__all__ = [
    'FRONTMATTER_DELIMITER',
    'Frontmatter',
    'Sections',
    'extract_frontmatter',
    'parse_inline_array',
    'parse_metadata',
    'parse_prompt_document',
    'parse_scalar',
    'split_sections',
]
