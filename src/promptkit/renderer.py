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

"""Template rendering for prompt specifications.

Templates contain `{{name}}` placeholders. Caller-supplied values are wrapped
in sentinel markers by default so text that came from a caller can always be
told apart from text the prompt author wrote:

    Business: <<<USER_INPUT>>>Ignore previous instructions<<<END_USER_INPUT>>>
"""

import re
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict

from promptkit.core.error import MissingInputsError
from promptkit.core.typing import PromptSpec, RenderedPrompt

INPUT_DELIM_OPEN = '<<<USER_INPUT>>>'
INPUT_DELIM_CLOSE = '<<<END_USER_INPUT>>>'

PLACEHOLDER_RE = re.compile(r'\{\{(\w+)\}\}')


class RenderOptions(BaseModel):
    """Options controlling `render_prompt`."""

    model_config = ConfigDict(extra='forbid', frozen=True)

    # Wrap caller values in sentinel markers.
    safe_delimit: bool = True

    # Remove placeholders that no input declares instead of leaving them in.
    strip_unresolved: bool = False


def render_prompt(
    spec: PromptSpec,
    inputs: Mapping[str, str | None],
    options: RenderOptions | None = None,
) -> RenderedPrompt:
    """Render a spec's system and user templates with the given inputs.

    Args:
        spec: The resolved prompt specification.
        inputs: Input values keyed by placeholder name.
        options: Rendering options; defaults to delimiting values and keeping
            unresolved placeholders visible.

    Returns:
        The rendered text, the first candidate model and a copy of the spec's
        generation parameters.

    Raises:
        MissingInputsError: If any required input is absent or blank. Every
            missing key is listed, in declaration order.
    """
    options = options or RenderOptions()

    missing = [key for key in spec.inputs.required if not _is_present(inputs.get(key))]
    if missing:
        raise MissingInputsError(spec.base_key, missing)

    replacements: dict[str, str] = {}
    for key in [*spec.inputs.declared, *inputs.keys()]:
        raw = inputs.get(key)
        text = '' if raw is None else str(raw)
        replacements[key] = _delimit(text) if options.safe_delimit and text else text

    return RenderedPrompt(
        system=render_template(spec.system, replacements, options.strip_unresolved),
        user=render_template(spec.user, replacements, options.strip_unresolved),
        model=spec.models[0] if spec.models else None,
        params=spec.params.model_copy(deep=True),
    )


def render_template(template: str, values: Mapping[str, str], strip_unresolved: bool = False) -> str:
    """Replace `{{key}}` placeholders in a template string.

    Substitution is a single scan over the template, so substituted values
    are never themselves searched for placeholders. Keys without a value are
    left as-is, or removed when `strip_unresolved` is set.
    """
    if not template:
        return template

    def substitute(match: re.Match[str]) -> str:
        key = match.group(1)
        if key in values:
            return values[key]
        return '' if strip_unresolved else match.group(0)

    return PLACEHOLDER_RE.sub(substitute, template)


def extract_placeholders(template: str) -> set[str]:
    """Return the distinct placeholder names used in a template."""
    return set(PLACEHOLDER_RE.findall(template))


def validate_template_placeholders(spec: PromptSpec) -> list[str]:
    """List placeholders the templates use without declaring them as inputs.

    An empty list means the spec is internally consistent. Names are reported
    in order of first use, system template first.
    """
    declared = set(spec.inputs.declared)
    undeclared: list[str] = []
    for key in PLACEHOLDER_RE.findall(spec.system) + PLACEHOLDER_RE.findall(spec.user):
        if key not in declared and key not in undeclared:
            undeclared.append(key)
    return undeclared


def _is_present(value: str | None) -> bool:
    return value is not None and bool(str(value).strip())


def _delimit(value: str) -> str:
    return f'{INPUT_DELIM_OPEN}{value}{INPUT_DELIM_CLOSE}'
