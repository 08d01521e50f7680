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

"""Parser for the restricted YAML subset used in prompt frontmatter.

Only the shapes prompt metadata needs are understood: scalars, quoted
strings, integers and decimals, block arrays, one level of nesting and
inline arrays inside a nested mapping:

    id: research_business
    version: 2
    description: "quoted string"
    models:
      - "@cf/meta/llama-3.1-70b-instruct"
    params:
      temperature: 0.3
    inputs:
      required: [business_name, city]

Whole-line `#` comments are skipped; trailing comments are not recognised.
A key repeated in the same mapping keeps its last value. Inline arrays split
on commas outside quotes; there is no escape syntax inside quoted elements.
"""

import re

from promptkit.core.typing import MetadataValue, Scalar

_KEY_RE = re.compile(r'^([A-Za-z_]\w*)\s*:\s*(.*)$')
_INT_RE = re.compile(r'^[-+]?\d+$')
_FLOAT_RE = re.compile(r'^[-+]?(\d+\.\d*|\.\d+|\d+)([eE][-+]?\d+)?$')


def parse_metadata(text: str) -> dict[str, MetadataValue]:
    """Parse a frontmatter block into a mapping of metadata values.

    Args:
        text: The frontmatter text, without the `---` delimiters.

    Returns:
        Top-level keys mapped to scalars, flat lists or one-level mappings.
        A key with no inline value and no indented children maps to None.
    """
    result: dict[str, MetadataValue] = {}
    lines = text.splitlines()
    i = 0

    while i < len(lines):
        line = lines[i]
        stripped = line.strip()
        if not stripped or stripped.startswith('#'):
            i += 1
            continue

        match = _KEY_RE.match(line)
        if not match:
            # Stray indented or malformed line at the top level.
            i += 1
            continue

        key, inline_value = match.group(1), match.group(2).strip()
        i += 1

        if inline_value:
            result[key] = _parse_value(inline_value)
            continue

        children: list[str] = []
        while i < len(lines):
            next_line = lines[i]
            if next_line.strip() and not next_line[:1].isspace():
                break
            if next_line.strip() and not next_line.strip().startswith('#'):
                children.append(next_line.strip())
            i += 1

        if not children:
            result[key] = None
        elif children[0].startswith('- '):
            result[key] = [parse_scalar(child[2:].strip()) for child in children if child.startswith('- ')]
        else:
            result[key] = _parse_mapping(children)

    return result


def _parse_mapping(children: list[str]) -> dict[str, Scalar | list[Scalar]]:
    mapping: dict[str, Scalar | list[Scalar]] = {}
    for child in children:
        match = _KEY_RE.match(child)
        if not match:
            continue
        value = match.group(2).strip()
        mapping[match.group(1)] = _parse_value(value) if value else None
    return mapping


def _parse_value(value: str) -> Scalar | list[Scalar]:
    if value.startswith('[') and value.endswith(']'):
        return parse_inline_array(value)
    return parse_scalar(value)


def parse_inline_array(value: str) -> list[Scalar]:
    """Parse an inline array such as `[a, 2, "c, d"]`.

    Commas inside single or double quotes do not split elements.
    """
    inner = value[1:-1].strip()
    if not inner:
        return []

    items: list[str] = []
    current: list[str] = []
    quote: str | None = None
    for ch in inner:
        if quote is None and ch in ('"', "'"):
            quote = ch
        elif quote is not None and ch == quote:
            quote = None
        elif quote is None and ch == ',':
            items.append(''.join(current).strip())
            current = []
            continue
        current.append(ch)

    tail = ''.join(current).strip()
    if tail:
        items.append(tail)

    return [parse_scalar(item) for item in items]


def parse_scalar(value: str) -> Scalar:
    """Parse a single scalar.

    `null` and `~` become None, `true`/`false` become booleans, quoted
    strings lose their quotes, integers and decimals become numbers and
    anything else is returned unchanged.
    """
    if value in ('null', '~'):
        return None
    if value == 'true':
        return True
    if value == 'false':
        return False

    if len(value) >= 2 and value[0] == value[-1] and value[0] in ('"', "'"):
        return value[1:-1]

    if _INT_RE.match(value):
        return int(value)
    if _FLOAT_RE.match(value):
        return float(value)

    return value
