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

"""Prompt document parsing.

A prompt document is frontmatter followed by exactly two sections:

    ---
    id: research_business
    version: 2
    models:
      - "@cf/meta/llama-3.1-70b-instruct"
    params:
      temperature: 0.3
      max_tokens: 4096
    inputs:
      required: [business_name]
      optional: [business_phone]
    outputs:
      format: json
    notes:
      pii: "Avoid customer personal data"
    ---

    # System
    You are a business research assistant...

    # User
    Business: {{business_name}}

Parsing either yields a complete `PromptSpec` or raises a `DocumentParseError`
subclass naming the missing piece; it never returns a partial spec.
"""

import math
import re
from collections.abc import Mapping
from typing import NamedTuple

from promptkit.core.error import FrontmatterParseError, InvalidFieldError, MissingFieldError, MissingSectionError
from promptkit.core.typing import (
    MetadataValue,
    OutputFormat,
    PromptInputs,
    PromptOutputs,
    PromptParams,
    PromptSpec,
)
from promptkit.document.metadata import parse_metadata

FRONTMATTER_DELIMITER = '---'

_SYSTEM_HEADING_RE = re.compile(r'^#[ \t]+System[ \t]*\r?$', re.IGNORECASE | re.MULTILINE)
_USER_HEADING_RE = re.compile(r'^#[ \t]+User[ \t]*\r?$', re.IGNORECASE | re.MULTILINE)


class Frontmatter(NamedTuple):
    """A document split into its metadata block and body."""

    frontmatter: str
    body: str


class Sections(NamedTuple):
    """The two instruction templates of a prompt body."""

    system: str
    user: str


def parse_prompt_document(raw: str) -> PromptSpec:
    """Parse a complete prompt document into a PromptSpec.

    Args:
        raw: The document text.

    Returns:
        The parsed specification with defaults applied to absent fields.

    Raises:
        FrontmatterParseError: If the frontmatter block is missing or unclosed.
        MissingFieldError: If `id` or `version` is absent.
        InvalidFieldError: If a field holds an unusable value.
        MissingSectionError: If the body lacks `# System` or `# User`.
    """
    frontmatter, body = extract_frontmatter(raw)
    meta = parse_metadata(frontmatter)
    sections = split_sections(body)

    prompt_id = _expect_text(meta, 'id')
    version = _expect_version(meta)

    params = _as_mapping(meta.get('params'))
    inputs = _as_mapping(meta.get('inputs'))
    outputs = _as_mapping(meta.get('outputs'))
    notes = _as_mapping(meta.get('notes'))

    return PromptSpec(
        id=prompt_id,
        version=version,
        variant=_to_text(meta['variant']) if meta.get('variant') is not None else None,
        description=_to_text(meta.get('description', '')),
        models=_as_text_list(meta.get('models')),
        params=PromptParams(
            temperature=_as_number('params.temperature', params.get('temperature'), 0.3),
            max_tokens=int(_as_number('params.max_tokens', params.get('max_tokens'), 4096)),
        ),
        inputs=PromptInputs(
            required=_as_text_list(inputs.get('required')),
            optional=_as_text_list(inputs.get('optional')),
        ),
        outputs=PromptOutputs(
            format=_as_output_format(outputs.get('format')),
            schema_name=_to_text(outputs['schema']) if outputs.get('schema') is not None else None,
        ),
        notes={key: _to_text(value) for key, value in notes.items()},
        system=sections.system,
        user=sections.user,
    )


def extract_frontmatter(raw: str) -> Frontmatter:
    """Split a document into its frontmatter text and its body.

    Windows (CRLF) line endings are normalised to LF first.

    Raises:
        FrontmatterParseError: If the document does not open with `---`, or the
            block is never closed.
    """
    text = raw.replace('\r\n', '\n').strip()

    if not text.startswith(FRONTMATTER_DELIMITER):
        raise FrontmatterParseError('Prompt document must start with frontmatter delimiter (---)')

    end = text.find('\n' + FRONTMATTER_DELIMITER, len(FRONTMATTER_DELIMITER))
    if end == -1:
        raise FrontmatterParseError('Prompt document has unclosed frontmatter')

    frontmatter = text[len(FRONTMATTER_DELIMITER) + 1 : end].strip()
    body = text[end + len(FRONTMATTER_DELIMITER) + 1 :].strip()
    return Frontmatter(frontmatter=frontmatter, body=body)


def split_sections(body: str) -> Sections:
    """Split a body into the `# System` and `# User` templates.

    Everything after `# User` belongs to the user template, including any
    further headings.

    Raises:
        MissingSectionError: If either heading is absent, or `# User` only
            appears before `# System`.
    """
    system_match = _SYSTEM_HEADING_RE.search(body)
    if not system_match:
        raise MissingSectionError('System')

    user_match = _USER_HEADING_RE.search(body, system_match.end())
    if not user_match:
        raise MissingSectionError('User')

    return Sections(
        system=body[system_match.end() : user_match.start()].strip(),
        user=body[user_match.end() :].strip(),
    )


def _expect_text(meta: Mapping[str, MetadataValue], field: str) -> str:
    value = meta.get(field)
    if value is None:
        raise MissingFieldError(field)
    return _to_text(value)


def _expect_version(meta: Mapping[str, MetadataValue]) -> int:
    value = meta.get('version')
    if value is None:
        raise MissingFieldError('version')
    number = _coerce_number(value)
    if number is None:
        raise InvalidFieldError('version', 'must be a number')
    if isinstance(number, float) and not number.is_integer():
        raise InvalidFieldError('version', 'must be an integer')
    if number < 1:
        raise InvalidFieldError('version', 'must be at least 1')
    return int(number)


def _as_mapping(value: MetadataValue) -> Mapping[str, MetadataValue]:
    return value if isinstance(value, dict) else {}


def _as_text_list(value: MetadataValue) -> list[str]:
    if isinstance(value, list):
        return [_to_text(item) for item in value]
    if isinstance(value, str):
        return [value]
    return []


def _as_number(field: str, value: MetadataValue, default: float) -> float:
    if value is None:
        return default
    number = _coerce_number(value)
    if number is None:
        raise InvalidFieldError(field, 'must be a number')
    return number


def _coerce_number(value: MetadataValue) -> int | float | None:
    """Numbers pass through; numeric strings such as `"2"` are converted."""
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        text = value.strip()
        try:
            value = int(text)
        except ValueError:
            try:
                value = float(text)
            except ValueError:
                return None
    if not isinstance(value, int | float) or not math.isfinite(value):
        return None
    return value


def _as_output_format(value: MetadataValue) -> OutputFormat:
    if value is None:
        return OutputFormat.TEXT
    try:
        return OutputFormat(_to_text(value))
    except ValueError:
        allowed = ', '.join(f.value for f in OutputFormat)
        raise InvalidFieldError('outputs.format', f'must be one of: {allowed}') from None


def _to_text(value: MetadataValue) -> str:
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if value is None:
        return ''
    if isinstance(value, list):
        return ', '.join(_to_text(item) for item in value)
    if isinstance(value, dict):
        return ', '.join(f'{k}: {_to_text(v)}' for k, v in value.items())
    return str(value)
