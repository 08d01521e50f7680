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

"""Input and output schemas for prompts.

Each prompt id maps to a pydantic input model, checked before rendering, and
an optional output schema, checked after the model answers. Validation
failures surface as `SchemaValidationError` with the pydantic error list in
`errors`.
"""

import sys
import threading
from collections.abc import Mapping
from typing import Annotated, Any, NamedTuple, Protocol

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from promptkit.core.error import SchemaNotFoundError, SchemaValidationError

if sys.version_info < (3, 11):
    from strenum import StrEnum
else:
    from enum import StrEnum


class SchemaValidator(Protocol):
    """What the prompt runner needs from a schema boundary."""

    def validate_input(self, prompt_id: str, raw_inputs: Mapping[str, Any]) -> dict[str, Any]: ...


class PromptSchemas(NamedTuple):
    """Input model and optional output schema of one prompt."""

    input: type[BaseModel]
    output: TypeAdapter | None = None


class SchemaRegistry:
    """Schemas keyed by prompt id."""

    def __init__(self) -> None:
        self._schemas: dict[str, PromptSchemas] = {}
        self._lock = threading.RLock()

    def define(self, prompt_id: str, input: type[BaseModel], output: Any = None) -> None:
        """Register the schemas of a prompt, replacing earlier ones.

        Args:
            prompt_id: The prompt the schemas belong to.
            input: Pydantic model validating the raw inputs.
            output: Any type pydantic can validate, or None to pass output
                through untouched.
        """
        adapter = None
        if output is not None:
            adapter = output if isinstance(output, TypeAdapter) else TypeAdapter(output)
        with self._lock:
            self._schemas[prompt_id] = PromptSchemas(input=input, output=adapter)

    def lookup(self, prompt_id: str) -> PromptSchemas | None:
        with self._lock:
            return self._schemas.get(prompt_id)

    def validate_input(self, prompt_id: str, raw_inputs: Mapping[str, Any]) -> dict[str, Any]:
        """Validate raw inputs and return them with defaults applied.

        Keys in the result use the names the prompt templates use.

        Raises:
            SchemaNotFoundError: If no schema is registered for the prompt.
            SchemaValidationError: If the inputs do not validate.
        """
        schemas = self.lookup(prompt_id)
        if schemas is None:
            raise SchemaNotFoundError(prompt_id)
        try:
            model = schemas.input.model_validate(dict(raw_inputs))
        except ValidationError as e:
            raise SchemaValidationError(prompt_id, 'input', e, e.errors(include_url=False)) from e
        return model.model_dump(mode='json', by_alias=True)

    def validate_output(self, prompt_id: str, raw_output: Any) -> Any:
        """Validate a model answer; passes it through when no output schema exists.

        Raises:
            SchemaNotFoundError: If no schema is registered for the prompt.
            SchemaValidationError: If the output does not validate.
        """
        schemas = self.lookup(prompt_id)
        if schemas is None:
            raise SchemaNotFoundError(prompt_id)
        if schemas.output is None:
            return raw_output
        try:
            return schemas.output.validate_python(raw_output)
        except ValidationError as e:
            raise SchemaValidationError(prompt_id, 'output', e, e.errors(include_url=False)) from e


# Research Business


class ResearchBusinessInput(BaseModel):
    model_config = ConfigDict(extra='ignore')

    business_name: str = Field(min_length=1)
    business_phone: str = ''
    business_address: str = ''
    google_place_id: str = ''
    additional_context: str = ''


class BusinessHours(BaseModel):
    day: str
    hours: str


class FaqEntry(BaseModel):
    question: str
    answer: str


class ResearchBusinessOutput(BaseModel):
    business_name: str
    tagline: str = Field(max_length=60)
    description: str
    services: list[str] = Field(min_length=3, max_length=8)
    hours: list[BusinessHours]
    faq: list[FaqEntry] = Field(min_length=3, max_length=5)
    seo_title: str = Field(max_length=60)
    seo_description: str = Field(max_length=160)


# Generate Site


class GenerateSiteInput(BaseModel):
    model_config = ConfigDict(extra='ignore')

    research_data: str = Field(min_length=1)


def _require_doctype(value: str) -> str:
    if '<!DOCTYPE html>' not in value and '<!doctype html>' not in value:
        raise ValueError('Output must be a valid HTML document')
    return value


GenerateSiteOutput = Annotated[str, AfterValidator(_require_doctype)]


# Score Quality


class ScoreQualityInput(BaseModel):
    model_config = ConfigDict(extra='ignore')

    html_content: str = Field(min_length=1)


class QualityScores(BaseModel):
    accuracy: float = Field(ge=0, le=1)
    completeness: float = Field(ge=0, le=1)
    professionalism: float = Field(ge=0, le=1)
    seo: float = Field(ge=0, le=1)
    accessibility: float = Field(ge=0, le=1)


class ScoreQualityOutput(BaseModel):
    scores: QualityScores
    overall: float = Field(ge=0, le=1)
    issues: list[str]
    suggestions: list[str]


# Site Copy


class Tone(StrEnum):
    FRIENDLY = 'friendly'
    PREMIUM = 'premium'
    NO_NONSENSE = 'no-nonsense'


class SiteCopyInput(BaseModel):
    model_config = ConfigDict(extra='ignore', populate_by_name=True)

    business_name: str = Field(min_length=1, alias='businessName')
    city: str = Field(min_length=1)
    services: list[str] = Field(default_factory=list)
    tone: Tone = Tone.FRIENDLY


def _require_heading(value: str) -> str:
    if '#' not in value:
        raise ValueError('Output must contain Markdown headings')
    return value


SiteCopyOutput = Annotated[str, AfterValidator(_require_heading)]


def default_schema_registry() -> SchemaRegistry:
    """Return a registry holding the schemas of the built-in prompts."""
    registry = SchemaRegistry()
    registry.define('research_business', ResearchBusinessInput, ResearchBusinessOutput)
    registry.define('generate_site', GenerateSiteInput, GenerateSiteOutput)
    registry.define('score_quality', ScoreQualityInput, ScoreQualityOutput)
    registry.define('site_copy', SiteCopyInput, SiteCopyOutput)
    return registry
