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

"""promptkit - versioned prompt templates with experiments and call telemetry.

Prompts are authored as documents, registered by `(id, version, variant)`,
rendered with injection-safe delimiting and invoked through an observability
wrapper that logs one structured record per model call.

Basic usage:
    from promptkit import PromptRegistry, register_builtin_prompts, render_prompt

    registry = PromptRegistry()
    register_builtin_prompts(registry)

    spec = registry.resolve('research_business', 2)
    rendered = render_prompt(spec, {'business_name': "Mario's Ristorante"})
"""

from promptkit.catalog import builtin_prompts, register_builtin_prompts
from promptkit.core.error import (
    DocumentParseError,
    FrontmatterParseError,
    InvalidFieldError,
    InvalidPromptKeyError,
    MissingFieldError,
    MissingInputsError,
    MissingSectionError,
    PromptKitError,
    PromptNotFoundError,
    SchemaNotFoundError,
    SchemaValidationError,
)
from promptkit.core.typing import (
    CallOutcome,
    LlmCallLog,
    LlmCallResult,
    OutputFormat,
    PromptInputs,
    PromptOutputs,
    PromptParams,
    PromptSpec,
    RegistryStats,
    RenderedPrompt,
    VariantConfig,
    build_prompt_key,
    parse_prompt_key,
)
from promptkit.document import parse_prompt_document
from promptkit.observability import InvocationOutput, ObservedCall, with_observability
from promptkit.registry import PromptRegistry
from promptkit.renderer import (
    RenderOptions,
    extract_placeholders,
    render_prompt,
    render_template,
    validate_template_placeholders,
)
from promptkit.runner import ModelRequest, run_prompt
from promptkit.schemas import SchemaRegistry, default_schema_registry

__all__ = [
    'CallOutcome',
    'DocumentParseError',
    'FrontmatterParseError',
    'InvalidFieldError',
    'InvalidPromptKeyError',
    'InvocationOutput',
    'LlmCallLog',
    'LlmCallResult',
    'MissingFieldError',
    'MissingInputsError',
    'MissingSectionError',
    'ModelRequest',
    'ObservedCall',
    'OutputFormat',
    'PromptInputs',
    'PromptKitError',
    'PromptNotFoundError',
    'PromptOutputs',
    'PromptParams',
    'PromptRegistry',
    'PromptSpec',
    'RegistryStats',
    'RenderOptions',
    'RenderedPrompt',
    'SchemaNotFoundError',
    'SchemaRegistry',
    'SchemaValidationError',
    'VariantConfig',
    'build_prompt_key',
    'builtin_prompts',
    'default_schema_registry',
    'extract_placeholders',
    'parse_prompt_document',
    'parse_prompt_key',
    'register_builtin_prompts',
    'render_prompt',
    'render_template',
    'run_prompt',
    'validate_template_placeholders',
    'with_observability',
]
