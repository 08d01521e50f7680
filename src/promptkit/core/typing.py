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

"""Shared data model for prompt specifications and call records.

Field names are snake_case. Every model also populates from and serializes to
the camelCase aliases (`maxTokens`, `promptId`, ...), which is the shape the
call logs are shipped in.
"""

import re
import sys
from typing import NamedTuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from promptkit.core.error import InvalidPromptKeyError

if sys.version_info < (3, 11):
    from strenum import StrEnum
else:
    from enum import StrEnum


Scalar = str | int | float | bool | None

# Closed set of values the frontmatter parser can produce. Nested mappings are
# one level deep, so their values are scalars or flat lists.
MetadataValue = Scalar | list[Scalar] | dict[str, Scalar | list[Scalar]]


class OutputFormat(StrEnum):
    """Formats a prompt can ask the model to answer in."""

    TEXT = 'text'
    JSON = 'json'
    MARKDOWN = 'markdown'
    HTML = 'html'


class CallOutcome(StrEnum):
    """Outcome of one observed model call."""

    SUCCESS = 'success'
    ERROR = 'error'


class PromptParams(BaseModel):
    """Generation parameters passed to the model."""

    model_config = ConfigDict(extra='forbid', populate_by_name=True)

    temperature: float = 0.3
    max_tokens: int = Field(default=4096, alias='maxTokens')


class PromptInputs(BaseModel):
    """Placeholder contract of a prompt's templates.

    Declaration order is preserved; it decides the order of missing keys in
    render errors.
    """

    model_config = ConfigDict(extra='forbid', populate_by_name=True)

    required: list[str] = Field(default_factory=list)
    optional: list[str] = Field(default_factory=list)

    @property
    def declared(self) -> list[str]:
        """Required keys followed by optional keys."""
        return [*self.required, *self.optional]


class PromptOutputs(BaseModel):
    """Expected output of a prompt."""

    model_config = ConfigDict(extra='forbid', populate_by_name=True)

    format: OutputFormat = OutputFormat.TEXT
    schema_name: str | None = Field(default=None, alias='schema')


class PromptSpec(BaseModel):
    """A versioned prompt definition: metadata plus two instruction templates."""

    model_config = ConfigDict(extra='forbid', populate_by_name=True)

    id: str
    version: int = Field(ge=1)
    variant: str | None = None
    description: str = ''
    models: list[str] = Field(default_factory=list)
    params: PromptParams = Field(default_factory=PromptParams)
    inputs: PromptInputs = Field(default_factory=PromptInputs)
    outputs: PromptOutputs = Field(default_factory=PromptOutputs)
    notes: dict[str, str] = Field(default_factory=dict)
    system: str
    user: str

    @field_validator('variant')
    @classmethod
    def blank_variant_is_default(cls, value: str | None) -> str | None:
        """An empty variant name means the default entry."""
        return value or None

    @property
    def key(self) -> str:
        """The canonical prompt key, `id@version` or `id@version:variant`."""
        return build_prompt_key(self.id, self.version, self.variant)

    @property
    def base_key(self) -> str:
        """The prompt key without the variant suffix."""
        return build_prompt_key(self.id, self.version)


class VariantConfig(BaseModel):
    """Experiment weights for one `(id, version)`.

    Weights are integer percentages; their insertion order is the bucket order.
    """

    model_config = ConfigDict(extra='forbid', populate_by_name=True)

    prompt_id: str = Field(alias='promptId')
    version: int
    weights: dict[str, int]


class RenderedPrompt(BaseModel):
    """Final instruction text and model settings for one call."""

    model_config = ConfigDict(extra='forbid', populate_by_name=True)

    system: str
    user: str
    model: str | None = None
    params: PromptParams


class LlmCallResult(BaseModel):
    """Result of one prompt invocation."""

    model_config = ConfigDict(extra='forbid', populate_by_name=True)

    success: bool
    output: str
    model: str | None = None
    tokens_used: int = Field(default=0, alias='tokensUsed')
    latency_ms: int = Field(default=0, alias='latencyMs')
    prompt_id: str = Field(alias='promptId')
    prompt_version: int = Field(alias='promptVersion')
    prompt_variant: str | None = Field(default=None, alias='promptVariant')


class LlmCallLog(BaseModel):
    """Structured record emitted for every observed model call."""

    model_config = ConfigDict(extra='forbid', populate_by_name=True)

    prompt_id: str = Field(alias='promptId')
    prompt_version: int = Field(alias='promptVersion')
    prompt_variant: str | None = Field(default=None, alias='promptVariant')
    model: str | None = None
    params: PromptParams
    input_hash: str = Field(alias='inputHash')
    latency_ms: int = Field(alias='latencyMs')
    token_count: int = Field(default=0, alias='tokenCount')
    cost: float | None = None
    outcome: CallOutcome
    retry_count: int = Field(default=0, alias='retryCount')
    error_message: str | None = Field(default=None, alias='errorMessage')
    timestamp: str


class RegistryStats(BaseModel):
    """Counts describing a registry's contents."""

    model_config = ConfigDict(extra='forbid', populate_by_name=True)

    total_prompts: int = Field(alias='totalPrompts')
    unique_ids: int = Field(alias='uniqueIds')
    variant_configs: int = Field(alias='variantConfigs')


class PromptKeyParts(NamedTuple):
    """Components of a parsed prompt key."""

    id: str
    version: int
    variant: str | None = None


_PROMPT_KEY_RE = re.compile(r'^(?P<id>[^@:\s]+)@(?P<version>\d+)(?::(?P<variant>[^@:\s]+))?$')


def build_prompt_key(prompt_id: str, version: int, variant: str | None = None) -> str:
    """Build a prompt key from its parts.

    Example:
        >>> build_prompt_key('site_copy', 3, 'b')
        'site_copy@3:b'
    """
    base = f'{prompt_id}@{version}'
    return f'{base}:{variant}' if variant else base


def parse_prompt_key(key: str) -> PromptKeyParts:
    """Parse `id@version[:variant]` into its parts.

    Raises:
        InvalidPromptKeyError: If the key does not have that shape.
    """
    match = _PROMPT_KEY_RE.match(key)
    if not match:
        raise InvalidPromptKeyError(key)
    return PromptKeyParts(
        id=match.group('id'),
        version=int(match.group('version')),
        variant=match.group('variant'),
    )
