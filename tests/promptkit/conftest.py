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

"""Shared fixtures for promptkit tests."""

import pytest
from opentelemetry import trace as trace_api
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

from promptkit.registry import PromptRegistry

_exporter = InMemorySpanExporter()


def _install_tracer_provider() -> None:
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(_exporter))
    trace_api.set_tracer_provider(provider)


_install_tracer_provider()


@pytest.fixture
def span_exporter() -> InMemorySpanExporter:
    """In-memory exporter receiving every finished span, emptied per test."""
    _exporter.clear()
    yield _exporter
    _exporter.clear()


@pytest.fixture
def registry() -> PromptRegistry:
    """A fresh, empty registry."""
    registry = PromptRegistry()
    yield registry
    registry.clear()
