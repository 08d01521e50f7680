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

"""Tests for the test model helpers."""

import pytest

from promptkit.runner import Message, ModelRequest
from promptkit.testing import EchoModel, ProgrammableModel


def make_request() -> ModelRequest:
    return ModelRequest(
        messages=[Message(role='system', content='be brief'), Message(role='user', content='hi')],
        temperature=0.2,
        max_tokens=64,
    )


@pytest.mark.asyncio
async def test_echo_model() -> None:
    """Ensure the echo reply reflects model, messages and settings."""
    model = EchoModel()

    reply = await model('m1', make_request())

    assert reply == {'response': '[ECHO:m1] system: be brief user: hi temperature=0.2 max_tokens=64'}
    assert model.last_model == 'm1'


@pytest.mark.asyncio
async def test_programmable_model_replays_in_order() -> None:
    """Ensure responses are replayed and exceptions raised in order."""
    model = ProgrammableModel(['first', ValueError('second fails'), 'third'])

    assert await model('m', make_request()) == 'first'
    with pytest.raises(ValueError, match='second fails'):
        await model('m', make_request())
    assert await model('m', make_request()) == 'third'
    assert model.request_idx == 3
