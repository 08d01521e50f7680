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

"""Observability for model calls.

Every call made through `with_observability` produces one structured
`llm_call` log record with the prompt identity, model, generation params,
a SHA-256 hash of the validated inputs, latency, token count, outcome and
retry count. The call also runs inside an OpenTelemetry span.
"""

import hashlib
import time
from collections.abc import Awaitable, Callable, Mapping
from datetime import datetime, timezone
from typing import Any, NamedTuple

from promptkit.core.codec import dump_canonical_json
from promptkit.core.error import get_error_message
from promptkit.core.logging import get_logger
from promptkit.core.tracing import run_in_new_span
from promptkit.core.typing import CallOutcome, LlmCallLog, PromptSpec

logger = get_logger(__name__)

SERVICE_NAME = 'ai_workflow'
LLM_CALL_EVENT = 'llm_call'


class InvocationOutput(NamedTuple):
    """What a model invocation closure hands back."""

    output: str
    token_count: int = 0


class ObservedCall(NamedTuple):
    """Raw model output plus the log record describing the call."""

    result: str
    log: LlmCallLog


Invoke = Callable[[], Awaitable[InvocationOutput | Mapping[str, Any]]]

# USD per 1K tokens.
_PRICING: dict[str, tuple[float, float]] = {
    '@cf/meta/llama-3.1-8b-instruct': (0.0, 0.0),
    '@cf/meta/llama-3.1-70b-instruct': (0.0, 0.0),
    'gpt-4o': (0.0025, 0.01),
    'gpt-4o-mini': (0.00015, 0.0006),
}


def sha256(data: str) -> str:
    """Hex SHA-256 digest of the UTF-8 encoding of `data`."""
    return hashlib.sha256(data.encode('utf-8')).hexdigest()


def hash_inputs(inputs: Mapping[str, Any]) -> str:
    """Hash normalized inputs so calls can be correlated and reproduced.

    Key order does not affect the result.
    """
    return sha256(dump_canonical_json(dict(inputs)))


def estimate_cost(model: str | None, input_tokens: int, output_tokens: int) -> float:
    """Rough USD cost of a call. Unknown models cost 0."""
    input_price, output_price = _PRICING.get(model or '', (0.0, 0.0))
    return (input_tokens / 1000) * input_price + (output_tokens / 1000) * output_price


def build_call_log(
    *,
    spec: PromptSpec,
    model: str | None,
    input_hash: str,
    latency_ms: int,
    token_count: int,
    outcome: CallOutcome,
    retry_count: int,
    cost: float | None = None,
    error_message: str | None = None,
) -> LlmCallLog:
    """Build the structured record for one model call."""
    return LlmCallLog(
        prompt_id=spec.id,
        prompt_version=spec.version,
        prompt_variant=spec.variant,
        model=model,
        params=spec.params.model_copy(deep=True),
        input_hash=input_hash,
        latency_ms=latency_ms,
        token_count=token_count,
        cost=cost,
        outcome=outcome,
        retry_count=retry_count,
        error_message=error_message,
        timestamp=datetime.now(timezone.utc).isoformat(),
    )


def emit_call_log(log: LlmCallLog) -> None:
    """Emit a call record. This is the single sink for every model call."""
    fields = log.model_dump(mode='json', exclude_none=True)
    if log.outcome == CallOutcome.ERROR:
        logger.error(LLM_CALL_EVENT, service=SERVICE_NAME, **fields)
    else:
        logger.info(LLM_CALL_EVENT, service=SERVICE_NAME, **fields)


async def with_observability(
    spec: PromptSpec,
    model: str | None,
    validated_inputs: Mapping[str, Any],
    retry_count: int,
    invoke: Invoke,
) -> ObservedCall:
    """Run one model invocation with timing and structured logging.

    `invoke` is awaited exactly once. `retry_count` describes retries the
    caller already made; nothing is retried here.

    Args:
        spec: The spec the call was rendered from.
        model: The model actually called.
        validated_inputs: Inputs after schema validation, hashed into the log.
        retry_count: Number of earlier attempts for this logical call.
        invoke: Zero-argument coroutine function performing the call and
            returning `InvocationOutput` or a mapping with `output` and
            `token_count` (or `tokenCount`).

    Returns:
        The raw output and the emitted log record.

    Raises:
        Whatever `invoke` raises, cancellation included, after an error record
        has been emitted.
    """
    input_hash = hash_inputs(validated_inputs)
    attributes = {
        'prompt_key': spec.key,
        'model': model,
        'retry_count': retry_count,
        'input_hash': input_hash,
    }

    with run_in_new_span('promptkit.llm_call', attributes) as span:
        start = time.perf_counter()
        try:
            output, token_count = _unpack(await invoke())
        except BaseException as e:
            log = build_call_log(
                spec=spec,
                model=model,
                input_hash=input_hash,
                latency_ms=_elapsed_ms(start),
                token_count=0,
                outcome=CallOutcome.ERROR,
                retry_count=retry_count,
                error_message=get_error_message(e),
            )
            emit_call_log(log)
            raise

        log = build_call_log(
            spec=spec,
            model=model,
            input_hash=input_hash,
            latency_ms=_elapsed_ms(start),
            token_count=token_count,
            outcome=CallOutcome.SUCCESS,
            retry_count=retry_count,
        )
        span.set_attributes({'latency_ms': log.latency_ms, 'token_count': log.token_count})
        emit_call_log(log)
        return ObservedCall(result=output, log=log)


def _unpack(value: InvocationOutput | Mapping[str, Any]) -> tuple[str, int]:
    if isinstance(value, Mapping):
        token_count = value.get('token_count', value.get('tokenCount', 0))
        return value['output'], int(token_count or 0)
    return value.output, int(value.token_count or 0)


def _elapsed_ms(start: float) -> int:
    return round((time.perf_counter() - start) * 1000)
