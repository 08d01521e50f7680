#!/usr/bin/env python3
#
# Copyright 2025 Google LLC
# SPDX-License-Identifier: Apache-2.0

"""Model doubles for testing code built on promptkit."""

from typing import Any

from promptkit.runner import ModelRequest


class ProgrammableModel:
    """A configurable model implementation for testing.

    This class allows test cases to define the responses the model should
    return, or exceptions it should raise, in call order.

    Attributes:
        request_idx: Index tracking which request is being processed.
        responses: Predefined responses; an Exception instance is raised
            instead of returned.
        last_model: The model id of the most recent call.
        last_request: The most recent request received.
    """

    def __init__(self, responses: list[Any] | None = None) -> None:
        """Initialize a new ProgrammableModel instance."""
        self.request_idx = 0
        self.responses: list[Any] = list(responses or [])
        self.last_model: str | None = None
        self.last_request: ModelRequest | None = None

    async def __call__(self, model: str | None, request: ModelRequest) -> Any:
        """Return (or raise) the next programmed response."""
        self.last_model = model
        self.last_request = request
        response = self.responses[self.request_idx]
        self.request_idx += 1
        if isinstance(response, Exception):
            raise response
        return response


class EchoModel:
    """A simple model implementation that echoes back the input.

    The reply is a readable rendering of the messages and settings received,
    which lets tests assert on what reached the model.

    Attributes:
        last_model: The model id of the most recent call.
        last_request: The most recent request received.
    """

    def __init__(self) -> None:
        """Initialize a new EchoModel instance."""
        self.last_model: str | None = None
        self.last_request: ModelRequest | None = None

    async def __call__(self, model: str | None, request: ModelRequest) -> dict[str, str]:
        """Echo the request back in a `{'response': ...}` payload."""
        self.last_model = model
        self.last_request = request
        merged_txt = ''.join(f' {m.role}: {m.content}' for m in request.messages)
        echo_resp = f'[ECHO:{model}]{merged_txt} temperature={request.temperature} max_tokens={request.max_tokens}'
        return {'response': echo_resp}
