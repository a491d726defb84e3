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

"""Pytest fixtures for end-to-end tests against a live cluster.

The cluster must already be running with SQL, security and the logfile
audit trail enabled. Point the harness at it with the ``SQL_QA_*``
environment variables; ``SQL_QA_AUDIT_LOG`` is required, otherwise the
module is skipped.
"""

import logging
from typing import Generator

import pytest

from sql_security_qa.api.sql.client import SqlRestClient
from sql_security_qa.config import ConfigurationError, HarnessConfig

# Configure logging for integration tests
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("integration_tests")


@pytest.fixture(scope="module")
def harness_config() -> HarnessConfig:
    """Configuration read from the environment.

    Returns:
        HarnessConfig for the live cluster.
    """
    try:
        config = HarnessConfig.from_env()
    except ConfigurationError as exc:
        pytest.skip(f"Live cluster not configured: {exc}")
    logger.info("Running against %s", config.base_url)
    logger.info("  Audit log: %s", config.audit_log)
    return config


@pytest.fixture(scope="module")
def sql_client(harness_config: HarnessConfig) -> Generator[SqlRestClient, None, None]:
    """SQL client for the live cluster.

    Yields:
        SqlRestClient authenticated as the administrator.
    """
    client = SqlRestClient.from_config(harness_config)
    yield client
    client.close()
