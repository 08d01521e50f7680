#!/usr/bin/env python3
#
# Copyright 2025 Google LLC
# SPDX-License-Identifier: Apache-2.0

"""Tests for the shared data model."""

import pytest
from pydantic import ValidationError

from promptkit.core.error import InvalidPromptKeyError
from promptkit.core.typing import (
    LlmCallResult,
    OutputFormat,
    PromptKeyParts,
    PromptParams,
    PromptSpec,
    build_prompt_key,
    parse_prompt_key,
)


def test_prompt_spec_defaults() -> None:
    """Ensure optional fields take their documented defaults."""
    spec = PromptSpec(id='greet', version=1, system='sys', user='usr')

    assert spec.variant is None
    assert spec.description == ''
    assert spec.models == []
    assert spec.params == PromptParams(temperature=0.3, max_tokens=4096)
    assert spec.inputs.required == []
    assert spec.inputs.optional == []
    assert spec.outputs.format == OutputFormat.TEXT
    assert spec.outputs.schema_name is None
    assert spec.notes == {}


def test_prompt_spec_rejects_version_below_one() -> None:
    """Ensure versions start at 1."""
    with pytest.raises(ValidationError):
        PromptSpec(id='greet', version=0, system='', user='')


def test_prompt_spec_accepts_camel_case_aliases() -> None:
    """Ensure specs load from the camelCase wire shape."""
    spec = PromptSpec.model_validate({
        'id': 'greet',
        'version': 2,
        'params': {'temperature': 0.5, 'maxTokens': 100},
        'outputs': {'format': 'json', 'schema': 'GreetOutput'},
        'system': 's',
        'user': 'u',
    })

    assert spec.params.max_tokens == 100
    assert spec.outputs.format == OutputFormat.JSON
    assert spec.outputs.schema_name == 'GreetOutput'


def test_prompt_spec_keys() -> None:
    """Ensure key and base_key reflect the variant."""
    spec = PromptSpec(id='site_copy', version=3, variant='b', system='', user='')
    assert spec.key == 'site_copy@3:b'
    assert spec.base_key == 'site_copy@3'


def test_empty_variant_is_normalized_to_default() -> None:
    """Ensure an empty variant name is the same as no variant."""
    spec = PromptSpec(id='site_copy', version=3, variant='', system='', user='')

    assert spec.variant is None
    assert spec.key == 'site_copy@3'


def test_declared_inputs_keep_declaration_order() -> None:
    """Ensure declared lists required keys before optional ones."""
    spec = PromptSpec.model_validate({
        'id': 'x',
        'version': 1,
        'inputs': {'required': ['b', 'a'], 'optional': ['c']},
        'system': '',
        'user': '',
    })
    assert spec.inputs.declared == ['b', 'a', 'c']


def test_build_prompt_key() -> None:
    """Ensure keys are built with and without a variant."""
    assert build_prompt_key('research_business', 2) == 'research_business@2'
    assert build_prompt_key('site_copy', 3, 'b') == 'site_copy@3:b'
    assert build_prompt_key('site_copy', 3, None) == 'site_copy@3'


def test_parse_prompt_key() -> None:
    """Ensure keys parse back into their parts."""
    assert parse_prompt_key('research_business@2') == PromptKeyParts('research_business', 2, None)
    assert parse_prompt_key('site_copy@3:b') == PromptKeyParts('site_copy', 3, 'b')


@pytest.mark.parametrize('key', ['research_business', 'x@', 'x@two', '@2', 'x@2:', 'x@2:b:c'])
def test_parse_prompt_key_rejects_malformed_keys(key: str) -> None:
    """Ensure malformed keys raise InvalidPromptKeyError."""
    with pytest.raises(InvalidPromptKeyError, match='Invalid prompt key format'):
        parse_prompt_key(key)


def test_call_result_serializes_with_aliases() -> None:
    """Ensure call results dump in the camelCase wire shape."""
    result = LlmCallResult(
        success=True,
        output='ok',
        model='m',
        tokens_used=12,
        latency_ms=5,
        prompt_id='p',
        prompt_version=1,
    )

    dumped = result.model_dump(by_alias=True, exclude_none=True)
    assert dumped == {
        'success': True,
        'output': 'ok',
        'model': 'm',
        'tokensUsed': 12,
        'latencyMs': 5,
        'promptId': 'p',
        'promptVersion': 1,
    }
