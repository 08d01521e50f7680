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

"""Base error classes and utilities for the prompt engine.

Every failure the engine raises is a `PromptKitError` carrying a status name,
so calling code can choose an HTTP status or operator message by type or by
`status` instead of by parsing message text.
"""

import traceback
from typing import Any

from pydantic import BaseModel, ConfigDict

from promptkit.core.status_types import StatusCodes, StatusName, http_status_code


class ErrorWireFormat(BaseModel):
    """Wire format for errors handed to an HTTP layer."""

    model_config = ConfigDict(extra='allow', populate_by_name=True)

    details: Any
    message: str
    status: str = StatusCodes.INTERNAL.name


class PromptKitError(Exception):
    """Base error class for prompt engine errors."""

    def __init__(
        self,
        *,
        message: str,
        status: StatusName | None = None,
        cause: Exception | None = None,
        details: Any = None,
        source: str | None = None,
    ) -> None:
        """Initialize a PromptKitError.

        Args:
            message: The error message.
            status: The status name for this error.
            cause: Optional underlying exception.
            details: Optional detail information.
            source: Optional source of the error.
        """
        if not status and isinstance(cause, PromptKitError):
            status = cause.status
        if not status:
            status = 'INTERNAL'

        source_prefix = f'{source}: ' if source else ''
        super().__init__(f'{source_prefix}{status}: {message}')
        self.original_message = message
        self.status: StatusName = status

        self.http_code = http_status_code(self.status)

        if not details:
            details = {}
        if 'stack' not in details and cause is not None:
            details['stack'] = get_error_stack(cause)

        self.details = details
        self.source = source
        self.cause = cause

    def to_serializable(self) -> ErrorWireFormat:
        """Returns a JSON-serializable representation of this object.

        Returns:
            An ErrorWireFormat model instance.
        """
        return ErrorWireFormat(
            details=self.details,
            status=StatusCodes[self.status].name,
            message=self.original_message,
        )


class DocumentParseError(PromptKitError):
    """A prompt document is structurally malformed."""

    def __init__(self, message: str, details: Any = None) -> None:
        super().__init__(status='INVALID_ARGUMENT', message=message, details=details, source='parser')


class FrontmatterParseError(DocumentParseError):
    """The frontmatter block is missing or unclosed."""


class MissingFieldError(DocumentParseError):
    """A mandatory frontmatter field is absent."""

    def __init__(self, field: str) -> None:
        super().__init__(f'Prompt frontmatter missing required field: {field}', details={'field': field})
        self.field = field


class InvalidFieldError(DocumentParseError):
    """A frontmatter field is present but holds an unusable value."""

    def __init__(self, field: str, reason: str) -> None:
        super().__init__(f'Prompt frontmatter field "{field}" {reason}', details={'field': field})
        self.field = field


class MissingSectionError(DocumentParseError):
    """The body lacks a `# System` or `# User` heading."""

    def __init__(self, section: str) -> None:
        super().__init__(f'Prompt body must contain a "# {section}" section', details={'section': section})
        self.section = section


class InvalidPromptKeyError(PromptKitError):
    """A prompt key is not of the form `id@version[:variant]`."""

    def __init__(self, key: str) -> None:
        super().__init__(
            status='INVALID_ARGUMENT',
            message=f'Invalid prompt key format: {key!r}',
            details={'key': key},
        )
        self.key = key


class PromptNotFoundError(PromptKitError):
    """No prompt is registered under the requested identity."""

    def __init__(self, prompt_key: str) -> None:
        super().__init__(
            status='NOT_FOUND',
            message=f'Prompt not found: {prompt_key}',
            details={'prompt_key': prompt_key},
        )
        self.prompt_key = prompt_key


class MissingInputsError(PromptKitError):
    """One or more required inputs were absent or blank at render time."""

    def __init__(self, prompt_key: str, missing: list[str]) -> None:
        super().__init__(
            status='FAILED_PRECONDITION',
            message=f'Missing required prompt inputs for "{prompt_key}": {", ".join(missing)}',
            details={'prompt_key': prompt_key, 'missing': list(missing)},
            source='renderer',
        )
        self.prompt_key = prompt_key
        self.missing = list(missing)


class SchemaNotFoundError(PromptKitError):
    """No schema is registered for a prompt id."""

    def __init__(self, prompt_id: str) -> None:
        super().__init__(
            status='NOT_FOUND',
            message=f'No schema registered for prompt: {prompt_id}',
            details={'prompt_id': prompt_id},
        )
        self.prompt_id = prompt_id


class SchemaValidationError(PromptKitError):
    """Input or output data failed schema validation."""

    def __init__(self, prompt_id: str, direction: str, cause: Exception, errors: list[Any] | None = None) -> None:
        super().__init__(
            status='INVALID_ARGUMENT',
            message=f'Invalid {direction} for prompt {prompt_id}: {cause}',
            cause=cause,
            details={'prompt_id': prompt_id, 'direction': direction, 'errors': errors or []},
            source='schemas',
        )
        self.prompt_id = prompt_id
        self.direction = direction
        self.errors = errors or []


def get_http_status(error: Any) -> int:
    """Get the HTTP status code for an error.

    Args:
        error: The error to get the status code for.

    Returns:
        The HTTP status code (500 for errors raised outside the engine).
    """
    if isinstance(error, PromptKitError):
        return error.http_code
    return 500


def get_error_message(error: Any) -> str:
    """Extract a message from an error object."""
    if isinstance(error, PromptKitError):
        return error.original_message
    if isinstance(error, BaseException):
        return str(error) or type(error).__name__
    return 'unknown error'


def get_error_stack(error: Exception) -> str | None:
    """Extract stack trace from an error object.

    Args:
        error: The error to get the stack trace from.

    Returns:
        The stack trace string if available.
    """
    if isinstance(error, Exception):
        return ''.join(traceback.format_tb(error.__traceback__))
    return None
