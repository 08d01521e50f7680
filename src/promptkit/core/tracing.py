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


"""Tracing for model invocations.

Spans are created through the OpenTelemetry API only. Without an SDK tracer
provider installed by the host application they are no-ops; with one, every
observed model call shows up as a `promptkit.llm_call` span carrying the
prompt identity as attributes.
"""

from collections.abc import Iterator, Mapping
from contextlib import contextmanager

from opentelemetry import trace as trace_api

from promptkit.core.logging import get_logger

ATTR_PREFIX = 'promptkit'
logger = get_logger(__name__)

tracer = trace_api.get_tracer('promptkit-tracer', 'v1')

AttributeValue = str | bool | int | float


class PromptSpan:
    """Light wrapper over an OpenTelemetry span that namespaces attributes."""

    def __init__(self, span: trace_api.Span) -> None:
        self._span = span

    @property
    def span(self) -> trace_api.Span:
        return self._span

    def set_attribute(self, key: str, value: AttributeValue | None) -> None:
        """Sets `promptkit:<key>`; None values are skipped."""
        if value is None:
            return
        self._span.set_attribute(f'{ATTR_PREFIX}:{key}', value)

    def set_attributes(self, attributes: Mapping[str, AttributeValue | None]) -> None:
        for key, value in attributes.items():
            self.set_attribute(key, value)


@contextmanager
def run_in_new_span(name: str, attributes: Mapping[str, AttributeValue | None] | None = None) -> Iterator[PromptSpan]:
    """Starts a new span under the current trace.

    The span is marked `success` when the block exits normally. When the block
    raises, the span records the exception, is marked `error` and the
    exception is re-raised unchanged.
    """
    with tracer.start_as_current_span(name=name, record_exception=False, set_status_on_exception=False) as ot_span:
        span = PromptSpan(ot_span)
        if attributes:
            span.set_attributes(attributes)
        try:
            yield span
            span.set_attribute('status', 'success')
        except Exception as e:
            logger.debug('span failed', span=name, error=str(e))
            span.set_attribute('status', 'error')
            ot_span.set_status(trace_api.Status(trace_api.StatusCode.ERROR, description=str(e)))
            ot_span.record_exception(e)
            raise
