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

"""Registry for versioned prompt specifications.

This module provides the PromptRegistry class, the lookup table for every
prompt version and experiment variant known to a process. Specs are
registered once at startup and resolved by `(id, version)` afterwards;
production code never asks for "latest".

Example:
    >>> registry = PromptRegistry()
    >>> registry.register_all(builtin_prompts())
    >>> registry.configure_variants('site_copy', 3, {'a': 80, 'b': 20})
    >>> spec = registry.resolve_variant('site_copy', 3, seed=org_id)
"""

import threading
from collections.abc import Iterable

from promptkit.core.logging import get_logger
from promptkit.core.typing import PromptSpec, RegistryStats, VariantConfig, build_prompt_key

logger = get_logger(__name__)

# Prompt store keyed by prompt key.
#
# Structure for illustration:
#
# ```python
# {
#     'site_copy@3': PromptSpec(...),
#     'site_copy@3:b': PromptSpec(...),
# }
# ```
PromptStore = dict[str, PromptSpec]

BUCKET_COUNT = 100

_FNV32_OFFSET_BASIS = 0x811C9DC5
_FNV32_PRIME = 0x01000193


def fnv1a_32(data: str) -> int:
    """32-bit FNV-1a hash of the UTF-8 encoding of `data`.

    Used for experiment bucketing because it is stable across processes,
    unlike the built-in `hash()`.
    """
    h = _FNV32_OFFSET_BASIS
    for byte in data.encode('utf-8'):
        h ^= byte
        h = (h * _FNV32_PRIME) & 0xFFFFFFFF
    return h


def bucket_for(seed: str, prompt_id: str, version: int) -> int:
    """Map a seed to a bucket in `[0, 100)` for one `(id, version)`.

    The prompt identity is mixed in so one seed does not land in the same
    bucket for every experiment.
    """
    return fnv1a_32(f'{seed}:{build_prompt_key(prompt_id, version)}') % BUCKET_COUNT


class PromptRegistry:
    """In-memory store of prompt specifications.

    Specs are keyed by `id@version` or `id@version:variant`. Registering the
    same key again replaces the previous spec, so `register_all` can run on
    every cold start without accumulating duplicates.

    Writes are expected only during startup and test setup; the lock keeps a
    stray concurrent write from corrupting the maps.
    """

    def __init__(self) -> None:
        """Initialize an empty PromptRegistry instance."""
        self._entries: PromptStore = {}
        self._variant_configs: dict[str, VariantConfig] = {}
        self._lock = threading.RLock()

    def register(self, spec: PromptSpec) -> None:
        """Register a spec, replacing any spec stored under the same key.

        Args:
            spec: The specification to store.
        """
        with self._lock:
            replaced = spec.key in self._entries
            self._entries[spec.key] = spec
        logger.debug('prompt registered', prompt_key=spec.key, replaced=replaced)

    def register_all(self, specs: Iterable[PromptSpec]) -> None:
        """Register several specs at once."""
        for spec in specs:
            self.register(spec)

    def resolve(self, prompt_id: str, version: int) -> PromptSpec | None:
        """Look up the default (variant-less) spec for `(id, version)`.

        Returns:
            The spec if registered, None otherwise.
        """
        with self._lock:
            return self._entries.get(build_prompt_key(prompt_id, version))

    def resolve_exact(self, prompt_id: str, version: int, variant: str | None) -> PromptSpec | None:
        """Look up one named variant; a None variant means the default entry."""
        with self._lock:
            return self._entries.get(build_prompt_key(prompt_id, version, variant))

    def resolve_latest(self, prompt_id: str) -> PromptSpec | None:
        """Return the highest-version default spec for an id.

        Intended for tooling and tests; call paths should pin a version.
        """
        best: PromptSpec | None = None
        for spec in self.list_versions(prompt_id):
            if best is None or spec.version > best.version:
                best = spec
        return best

    def list_all(self) -> list[PromptSpec]:
        """Return every registered spec, variants included."""
        with self._lock:
            return list(self._entries.values())

    def list_versions(self, prompt_id: str) -> list[PromptSpec]:
        """Return the default specs of an id sorted by ascending version."""
        with self._lock:
            specs = [s for s in self._entries.values() if s.id == prompt_id and s.variant is None]
        return sorted(specs, key=lambda s: s.version)

    def list_variants(self, prompt_id: str, version: int) -> list[PromptSpec]:
        """Return the named variants of `(id, version)`, excluding the default."""
        with self._lock:
            return [
                s
                for s in self._entries.values()
                if s.id == prompt_id and s.version == version and s.variant is not None
            ]

    def configure_variants(self, prompt_id: str, version: int, weights: dict[str, int]) -> None:
        """Store or replace the experiment weights for `(id, version)`.

        Weights are percentages applied in insertion order. They are not
        required to sum to 100: the last variant absorbs whatever the
        cumulative ranges leave uncovered.

        Example:
            >>> registry.configure_variants('site_copy', 3, {'a': 80, 'b': 20})
        """
        total = sum(weights.values())
        if total != BUCKET_COUNT:
            logger.warning(
                'variant weights do not sum to 100',
                prompt_key=build_prompt_key(prompt_id, version),
                total=total,
            )
        config = VariantConfig(prompt_id=prompt_id, version=version, weights=dict(weights))
        with self._lock:
            self._variant_configs[build_prompt_key(prompt_id, version)] = config

    def variant_config(self, prompt_id: str, version: int) -> VariantConfig | None:
        """Return the experiment weights for `(id, version)`, if any."""
        with self._lock:
            return self._variant_configs.get(build_prompt_key(prompt_id, version))

    def select_variant(self, prompt_id: str, version: int, seed: str) -> str | None:
        """Pick the variant name a seed is bucketed into.

        The same seed always yields the same variant for a given weight table.

        Returns:
            The variant name, or None when no experiment is configured.
        """
        config = self.variant_config(prompt_id, version)
        if config is None or not config.weights:
            return None

        bucket = bucket_for(seed, prompt_id, version)
        cumulative = 0
        for variant, weight in config.weights.items():
            cumulative += weight
            if bucket < cumulative:
                return variant

        return next(reversed(config.weights))

    def resolve_variant(self, prompt_id: str, version: int, seed: str) -> PromptSpec | None:
        """Resolve `(id, version)` with deterministic experiment bucketing.

        Without an experiment, or when the selected variant has no registered
        spec, this behaves exactly like `resolve`.
        """
        variant = self.select_variant(prompt_id, version, seed)
        if variant is not None:
            spec = self.resolve_exact(prompt_id, version, variant)
            if spec is not None:
                return spec
        return self.resolve(prompt_id, version)

    def get_stats(self) -> RegistryStats:
        """Count registered specs, base identities and experiments."""
        with self._lock:
            return RegistryStats(
                total_prompts=len(self._entries),
                unique_ids=len({s.base_key for s in self._entries.values()}),
                variant_configs=len(self._variant_configs),
            )

    def clear(self) -> None:
        """Remove every spec and experiment. For test isolation only."""
        with self._lock:
            self._entries.clear()
            self._variant_configs.clear()
