# Copyright 2026 Dell Inc. or its subsidiaries. All Rights Reserved.
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

"""Harness configuration.

Settings come from environment variables. ``SQL_QA_CONFIG`` may point at a
YAML file whose keys (the lower-case names of the fields below) override the
environment.
"""

import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

import yaml

logger = logging.getLogger(__name__)

DEFAULT_HIDDEN_INDICES = (".security", ".security-v6")


class ConfigurationError(Exception):
    """Exception raised when the harness is missing required settings."""


@dataclass(frozen=True)
class HarnessConfig:
    """Configuration for a run of the SQL security suite.

    Attributes:
        audit_log: Path to the audit log written by the cluster.
        base_url: Base URL of the cluster's REST endpoint.
        admin_user: Administrative principal every request authenticates as.
        admin_password: Password of ``admin_user``.
        user_password: Password given to every user a scenario creates.
        audit_timeout: Seconds to keep polling the audit log.
        hidden_indices: Indices dropped from the administrator's events.
    """

    audit_log: Path
    base_url: str = "http://localhost:9200"
    admin_user: str = "test_admin"
    admin_password: str = "x-pack-test-password"
    user_password: str = "testpass"
    audit_timeout: float = 10.0
    hidden_indices: Tuple[str, ...] = field(default=DEFAULT_HIDDEN_INDICES)

    ENV_PREFIX = "SQL_QA_"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "HarnessConfig":
        """Build the configuration from the environment.

        Args:
            environ: Mapping to read instead of ``os.environ``.

        Returns:
            Validated configuration.

        Raises:
            ConfigurationError: If the audit log location is not set or a
                value cannot be converted.
        """
        environ = os.environ if environ is None else environ
        values: Dict[str, Any] = {}
        for config_field in fields(cls):
            raw = environ.get(cls.ENV_PREFIX + config_field.name.upper())
            if raw is not None:
                values[config_field.name] = raw

        config_file = environ.get(cls.ENV_PREFIX + "CONFIG")
        if config_file:
            values.update(_load_yaml(Path(config_file)))

        return cls.from_mapping(values)

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "HarnessConfig":
        """Build the configuration from already collected raw values."""
        known = {config_field.name for config_field in fields(cls)}
        unknown = sorted(set(values) - known)
        if unknown:
            raise ConfigurationError(f"Unknown configuration keys: {unknown}")

        if not values.get("audit_log"):
            raise ConfigurationError(
                "SQL_QA_AUDIT_LOG must be set to run the SQL security suite. It "
                "should be the absolute path to the audit log file generated by "
                "running the cluster with audit logging enabled."
            )

        converted = dict(values)
        converted["audit_log"] = Path(values["audit_log"])
        if "audit_timeout" in values:
            try:
                converted["audit_timeout"] = float(values["audit_timeout"])
            except (TypeError, ValueError) as exc:
                raise ConfigurationError(
                    f"audit_timeout must be a number, got {values['audit_timeout']!r}"
                ) from exc
        if "hidden_indices" in values:
            converted["hidden_indices"] = _as_names(values["hidden_indices"])

        config = cls(**converted)
        logger.debug("Loaded harness configuration for %s", config.base_url)
        return config


def _load_yaml(path: Path) -> Dict[str, Any]:
    """Read overrides from a YAML mapping file."""
    try:
        with path.open(encoding="utf-8") as config_file:
            loaded = yaml.safe_load(config_file) or {}
    except OSError as exc:
        raise ConfigurationError(f"Cannot read config file {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Invalid YAML in config file {path}: {exc}") from exc

    if not isinstance(loaded, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping")
    return loaded


def _as_names(value: Any) -> Tuple[str, ...]:
    """Accept either a comma separated string or a list of names."""
    if isinstance(value, str):
        items = value.split(",")
    else:
        items = list(value or [])
    return tuple(str(item).strip() for item in items if str(item).strip())
