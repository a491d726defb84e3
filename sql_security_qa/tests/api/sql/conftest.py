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

"""Fixtures running the scenarios against the in-process fake cluster."""

from pathlib import Path
from typing import Generator

import pytest
from fastapi.testclient import TestClient

from sql_security_qa.api.sql.client import SqlRestClient
from sql_security_qa.config import HarnessConfig
from sql_security_qa.tests.mocks.fake_sql_cluster import FakeSqlCluster


@pytest.fixture(scope="class")
def harness_config(tmp_path_factory: pytest.TempPathFactory) -> HarnessConfig:
    """Configuration pointing at a fresh audit log file.

    Returns:
        HarnessConfig with a short audit timeout so mismatches fail fast.
    """
    log_dir: Path = tmp_path_factory.mktemp("audit")
    return HarnessConfig.from_mapping(
        {"audit_log": str(log_dir / "audit.log"), "audit_timeout": 0.5}
    )


@pytest.fixture(scope="class")
def fake_cluster(harness_config: HarnessConfig) -> FakeSqlCluster:
    """Fake cluster writing to the configured audit log."""
    return FakeSqlCluster(
        harness_config.audit_log,
        admin_user=harness_config.admin_user,
        admin_password=harness_config.admin_password,
    )


@pytest.fixture(scope="class")
def sql_client(
    fake_cluster: FakeSqlCluster,
    harness_config: HarnessConfig,
) -> Generator[SqlRestClient, None, None]:
    """SQL client talking to the fake cluster through a TestClient.

    Yields:
        SqlRestClient authenticated as the administrator.
    """
    with TestClient(fake_cluster.app) as http_client:
        yield SqlRestClient(
            http_client,
            admin_user=harness_config.admin_user,
            admin_password=harness_config.admin_password,
        )
