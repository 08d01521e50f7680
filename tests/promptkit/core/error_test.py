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

"""Unit tests for the error module."""

from promptkit.core.error import (
    ErrorWireFormat,
    FrontmatterParseError,
    InvalidFieldError,
    MissingFieldError,
    MissingInputsError,
    MissingSectionError,
    PromptKitError,
    PromptNotFoundError,
    SchemaValidationError,
    get_error_message,
    get_error_stack,
    get_http_status,
)


def test_promptkit_error() -> None:
    """Test that creating a PromptKitError works."""
    error = PromptKitError(
        status='INVALID_ARGUMENT',
        message='Test message',
        details={'extra_msg': 'Test detail'},
        source='test_source',
    )
    assert error.original_message == 'Test message'
    assert error.http_code == 400
    assert error.status == 'INVALID_ARGUMENT'
    assert error.details['extra_msg'] == 'Test detail'
    assert error.source == 'test_source'
    assert str(error) == 'test_source: INVALID_ARGUMENT: Test message'

    error_no_source = PromptKitError(status='INTERNAL', message='Test message 2')
    assert str(error_no_source) == 'INTERNAL: Test message 2'


def test_promptkit_error_defaults_to_internal() -> None:
    """Test that an error without a status is INTERNAL."""
    error = PromptKitError(message='boom')
    assert error.status == 'INTERNAL'
    assert error.http_code == 500


def test_promptkit_error_inherits_status_from_cause() -> None:
    """Test that the status of a wrapped PromptKitError is kept."""
    cause = PromptNotFoundError('site_copy@3')
    error = PromptKitError(message='wrapped', cause=cause)
    assert error.status == 'NOT_FOUND'
    assert error.cause is cause
    assert 'stack' in error.details


def test_promptkit_error_to_serializable() -> None:
    """Test that PromptKitError can be serialized to its wire format."""
    error = PromptKitError(status='NOT_FOUND', message='Resource not found', details={'id': 123})
    serializable = error.to_serializable()
    assert isinstance(serializable, ErrorWireFormat)
    assert serializable.status == 'NOT_FOUND'
    assert serializable.message == 'Resource not found'
    assert serializable.details['id'] == 123


def test_parse_errors_name_the_missing_piece() -> None:
    """Test that each parse error names what is missing and maps to 400."""
    frontmatter = FrontmatterParseError('Prompt document has unclosed frontmatter')
    field = MissingFieldError('version')
    invalid = InvalidFieldError('version', 'must be a number')
    section = MissingSectionError('User')

    assert field.field == 'version'
    assert 'missing required field: version' in str(field)
    assert 'field "version" must be a number' in str(invalid)
    assert '"# User"' in str(section)
    for error in (frontmatter, field, invalid, section):
        assert error.status == 'INVALID_ARGUMENT'
        assert get_http_status(error) == 400


def test_missing_inputs_error_lists_every_key() -> None:
    """Test that MissingInputsError carries all missing keys in order."""
    error = MissingInputsError('site_copy@3', ['businessName', 'city'])
    assert error.missing == ['businessName', 'city']
    assert error.prompt_key == 'site_copy@3'
    assert error.status == 'FAILED_PRECONDITION'
    assert error.original_message == 'Missing required prompt inputs for "site_copy@3": businessName, city'


def test_prompt_not_found_error() -> None:
    """Test the message and status of PromptNotFoundError."""
    error = PromptNotFoundError('research_business@9')
    assert error.original_message == 'Prompt not found: research_business@9'
    assert get_http_status(error) == 404


def test_schema_validation_error_keeps_cause() -> None:
    """Test that SchemaValidationError records the underlying failure."""
    cause = ValueError('too short')
    error = SchemaValidationError('score_quality', 'output', cause, [{'loc': ('overall',)}])
    assert error.cause is cause
    assert error.direction == 'output'
    assert error.errors == [{'loc': ('overall',)}]
    assert error.status == 'INVALID_ARGUMENT'


def test_get_http_status() -> None:
    """Test that get_http_status returns the correct HTTP status code."""
    error = PromptKitError(status='NOT_FOUND', message='Not found')
    assert get_http_status(error) == 404

    non_promptkit_error = ValueError('Some error')
    assert get_http_status(non_promptkit_error) == 500


def test_get_error_message() -> None:
    """Test that get_error_message returns the correct error message."""
    assert get_error_message(ValueError('Test message')) == 'Test message'
    assert get_error_message(PromptKitError(status='INTERNAL', message='inner')) == 'inner'
    assert get_error_message(RuntimeError()) == 'RuntimeError'
    assert get_error_message('not an error') == 'unknown error'


def test_get_error_stack() -> None:
    """Test that get_error_stack returns the stack trace of a raised error."""
    try:
        raise ValueError('Test error')
    except ValueError as e:
        stack = get_error_stack(e)
    assert stack is not None
    assert 'test_get_error_stack' in stack
