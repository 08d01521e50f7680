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

"""Convenience functionality to determine the running environment."""

import logging
import os
import sys

if sys.version_info < (3, 11):
    from strenum import StrEnum
else:
    from enum import StrEnum


class EnvVar(StrEnum):
    """Enumerates all the environment variables read by promptkit."""

    PROMPTKIT_ENV = 'PROMPTKIT_ENV'
    PROMPTKIT_LOG_LEVEL = 'PROMPTKIT_LOG_LEVEL'


class PromptKitEnvironment(StrEnum):
    """Enumerates all the environments promptkit can run in."""

    DEV = 'dev'
    PROD = 'prod'


def is_dev_environment() -> bool:
    """Returns True if the current environment is a development environment.

    Returns:
        True if the current environment is a development environment.
    """
    return get_current_environment() == PromptKitEnvironment.DEV


def is_prod_environment() -> bool:
    """Returns True if the current environment is a production environment.

    Returns:
        True if the current environment is a production environment.
    """
    return get_current_environment() == PromptKitEnvironment.PROD


def get_current_environment() -> PromptKitEnvironment:
    """Returns the current environment.

    Returns:
        The current environment.
    """
    env = os.getenv(EnvVar.PROMPTKIT_ENV)
    if env is None:
        return PromptKitEnvironment.PROD
    try:
        return PromptKitEnvironment(env)
    except ValueError:
        return PromptKitEnvironment.PROD


def get_log_level() -> int:
    """Returns the numeric log level configured through the environment.

    Unknown level names fall back to INFO.
    """
    name = os.getenv(EnvVar.PROMPTKIT_LOG_LEVEL, 'INFO').upper()
    level = logging.getLevelName(name)
    if isinstance(level, int):
        return level
    return logging.INFO
