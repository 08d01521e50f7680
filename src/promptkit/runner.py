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

"""Run one prompt end to end.

`run_prompt` strings the engine together for a single call:

    validate input -> resolve -> render -> invoke model (observed) -> result

The model itself is a collaborator passed in by the caller. Output validation
is left to the caller, who knows how the raw text should be decoded first.
"""

import functools
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from promptkit.core.codec import dump_json
from promptkit.core.error import PromptNotFoundError
from promptkit.core.logging import get_logger
from promptkit.core.typing import LlmCallResult, PromptSpec, build_prompt_key
from promptkit.observability import InvocationOutput, with_observability
from promptkit.registry import PromptRegistry
from promptkit.renderer import RenderOptions, render_prompt
from promptkit.schemas import SchemaValidator, default_schema_registry

logger = get_logger(__name__)


class Message(BaseModel):
    """One chat message sent to the model."""

    model_config = ConfigDict(extra='forbid')

    role: str
    content: str


class ModelRequest(BaseModel):
    """Request handed to the model-invocation collaborator."""

    model_config = ConfigDict(extra='forbid', populate_by_name=True)

    messages: list[Message]
    temperature: float
    max_tokens: int = Field(alias='maxTokens')


ModelFn = Callable[[str | None, ModelRequest], Awaitable[Any]]


async def run_prompt(
    registry: PromptRegistry,
    model_fn: ModelFn,
    prompt_id: str,
    version: int,
    raw_inputs: Mapping[str, Any],
    *,
    validator: SchemaValidator | None = None,
    variant: str | None = None,
    seed: str | None = None,
    retry_count: int = 0,
    model_override: str | None = None,
    render_options: RenderOptions | None = None,
) -> LlmCallResult:
    """Validate, resolve, render and invoke one prompt.

    Args:
        registry: Registry to resolve the prompt from.
        model_fn: Coroutine function `(model, request)` returning a string, a
            mapping with a `response` key or an object with a `response`
            attribute.
        prompt_id: Prompt id.
        version: Pinned prompt version.
        raw_inputs: Unvalidated inputs.
        validator: Schema boundary; defaults to the built-in schemas.
        variant: Explicit variant to use. Ignored when `seed` is given.
        seed: Stable caller identity for experiment bucketing.
        retry_count: Attempts already made for this call, recorded in the log.
        model_override: Model to call instead of the spec's first candidate.
        render_options: Options passed to the renderer.

    Returns:
        The call result.

    Raises:
        SchemaNotFoundError: If the validator has no schema for the prompt.
        SchemaValidationError: If the inputs fail validation.
        PromptNotFoundError: If the prompt is not registered.
        MissingInputsError: If a required input is blank after validation.
    """
    validated = (validator or _default_validator()).validate_input(prompt_id, raw_inputs)

    spec = _resolve(registry, prompt_id, version, variant=variant, seed=seed)
    if spec is None:
        raise PromptNotFoundError(build_prompt_key(prompt_id, version, None if seed else variant))

    rendered = render_prompt(spec, stringify_inputs(validated), render_options or RenderOptions())
    model = model_override or rendered.model

    request = ModelRequest(
        messages=[
            Message(role='system', content=rendered.system),
            Message(role='user', content=rendered.user),
        ],
        temperature=rendered.params.temperature,
        max_tokens=rendered.params.max_tokens,
    )

    async def invoke() -> InvocationOutput:
        response = await model_fn(model, request)
        return InvocationOutput(output=response_text(response))

    output, log = await with_observability(spec, model, validated, retry_count, invoke)

    return LlmCallResult(
        success=True,
        output=output,
        model=model,
        tokens_used=log.token_count,
        latency_ms=log.latency_ms,
        prompt_id=spec.id,
        prompt_version=spec.version,
        prompt_variant=spec.variant,
    )


@functools.cache
def _default_validator() -> SchemaValidator:
    return default_schema_registry()


def _resolve(
    registry: PromptRegistry,
    prompt_id: str,
    version: int,
    *,
    variant: str | None,
    seed: str | None,
) -> PromptSpec | None:
    if seed:
        return registry.resolve_variant(prompt_id, version, seed)
    if variant:
        return registry.resolve_exact(prompt_id, version, variant)
    return registry.resolve(prompt_id, version)


def stringify_inputs(values: Mapping[str, Any]) -> dict[str, str]:
    """Turn validated inputs into template strings.

    Lists are joined with `, ` and None becomes an empty string.
    """
    result: dict[str, str] = {}
    for key, value in values.items():
        if isinstance(value, list | tuple):
            result[key] = ', '.join(str(item) for item in value)
        elif value is None:
            result[key] = ''
        else:
            result[key] = str(value)
    return result


def response_text(response: Any) -> str:
    """Extract completion text from whatever the model collaborator returned."""
    if isinstance(response, str):
        return response
    if isinstance(response, Mapping):
        text = response.get('response')
    else:
        text = getattr(response, 'response', None)
    if isinstance(text, str):
        return text
    logger.debug('model response has no text field, serializing', response_type=type(response).__name__)
    return dump_json(response)
