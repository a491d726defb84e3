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

"""Shared pytest fixtures for the SQL security scenarios.

The scenario fixtures below need ``harness_config`` and ``sql_client``.
Those are provided by ``tests/api/sql/conftest.py`` (in-process fake
cluster) and ``tests/integration/conftest.py`` (live cluster).
"""

import logging
from typing import Callable, Generator, List, Tuple

import pytest

from sql_security_qa.api.sql.client import SqlRestClient
from sql_security_qa.config import HarnessConfig
from sql_security_qa.orchestrator.audit import AuditLogAsserter, AuditSuiteContext
from sql_security_qa.orchestrator.scenarios import RestSqlActions, SqlActions

logger = logging.getLogger("sql_security_tests")

FIXTURE_DOCUMENTS: List[Tuple[str, str, dict]] = [
    ("test", "1", {"a": 1, "b": 2, "c": 3}),
    ("test", "2", {"a": 4, "b": 5, "c": 6}),
    ("bort", "1", {"a": "test"}),
]


def bulk_actions(documents: List[Tuple[str, str, dict]]) -> List[dict]:
    """Turn ``(index, id, source)`` triples into bulk action/source lines."""
    actions = []
    for index, doc_id, source in documents:
        actions.append({"index": {"_index": index, "_type": "doc", "_id": doc_id}})
        actions.append(source)
    return actions


@pytest.fixture(scope="class")
def audit_context(
    harness_config: HarnessConfig,
    sql_client: SqlRestClient,
) -> Generator[AuditSuiteContext, None, None]:
    """Suite-wide audit state.

    The cluster is not wiped between tests because that would perturb the
    audit trail; indices are deleted once the whole class is finished.

    Yields:
        AuditSuiteContext shared by every test of the class.
    """
    context = AuditSuiteContext.from_config(harness_config)
    yield context
    logger.info("Deleting all indices after the suite")
    try:
        sql_client.delete_all_indices()
    finally:
        context.reset()


@pytest.fixture
def admin_user(harness_config: HarnessConfig) -> str:
    """Administrative principal the cluster attributes admin requests to."""
    return harness_config.admin_user


@pytest.fixture
def seeded_cluster(audit_context: AuditSuiteContext, sql_client: SqlRestClient) -> None:
    """Write the fixture documents once per suite."""
    if audit_context.one_time_setup:
        return
    logger.info("Writing %d fixture documents", len(FIXTURE_DOCUMENTS))
    sql_client.bulk(bulk_actions(FIXTURE_DOCUMENTS))
    audit_context.one_time_setup = True


@pytest.fixture
def audit(
    audit_context: AuditSuiteContext,
    seeded_cluster: None,  # noqa: W0613
) -> Callable[[], AuditLogAsserter]:
    """Factory for asserter sessions bound to this test's log window.

    The offset is captured when the fixture runs, before the test body.

    Returns:
        Callable creating a new AuditLogAsserter.
    """
    offset = audit_context.audit_log.current_offset()
    return lambda: audit_context.asserter(offset)


@pytest.fixture
def actions(sql_client: SqlRestClient, seeded_cluster: None) -> SqlActions:  # noqa: W0613
    """Scenario actions driven through the SQL REST endpoint."""
    return RestSqlActions(sql_client)


@pytest.fixture
def create_user(
    sql_client: SqlRestClient,
    harness_config: HarnessConfig,
) -> Callable[[str, str], None]:
    """Create a user with the fixed test password and a single role.

    Returns:
        Callable taking the user name and the role name.
    """

    def _create(name: str, role: str) -> None:
        sql_client.create_user(name, harness_config.user_password, [role])

    return _create
