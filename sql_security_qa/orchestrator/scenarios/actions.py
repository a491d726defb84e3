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

"""Actions a security scenario takes against the SQL surface."""

import logging
from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence

from sql_security_qa.api.sql.client import SqlResponse, SqlRestClient
from sql_security_qa.core.sql.exceptions import SqlForbiddenError, UnknownColumnError

logger = logging.getLogger(__name__)

ADMIN_QUERY = "SELECT * FROM test ORDER BY a"
ADMIN_COLUMNS = [("a", "long"), ("b", "long"), ("c", "long")]
ADMIN_ROWS = [[1, 2, 3], [4, 5, 6]]
SCROLL_FETCH_SIZE = 1


class SqlActions(Protocol):
    """Actions taken by a scenario.

    ``user=None`` runs the statement as the administrator.
    """

    def query_works_as_admin(self) -> None:
        """Assert the administrator can read the fixture index."""
        ...

    def expect_matches_admin(self, admin_sql: str, user: str, user_sql: str) -> None:
        """Assert ``user_sql`` as ``user`` returns what ``admin_sql`` returns."""
        ...

    def expect_scroll_matches_admin(self, admin_sql: str, user: str, user_sql: str) -> None:
        """Same as :meth:`expect_matches_admin`, scrolling one row at a time."""
        ...

    def expect_describe(self, columns: Mapping[str, str], user: Optional[str]) -> None:
        """Assert DESCRIBE returns exactly ``columns`` (name to type)."""
        ...

    def expect_show_tables(self, tables: Sequence[str], user: Optional[str]) -> None:
        """Assert SHOW TABLES lists exactly ``tables``."""
        ...

    def expect_forbidden(self, user: str, sql: str) -> None:
        """Assert the statement is denied by the security layer."""
        ...

    def expect_unknown_column(self, user: str, sql: str, column: str) -> None:
        """Assert the statement fails because ``column`` is hidden."""
        ...


class RestSqlActions(SqlActions):
    """Scenario actions driven through the SQL REST endpoint."""

    def __init__(self, client: SqlRestClient) -> None:
        """Initialize the actions.

        Args:
            client: REST client authenticated as the administrator.
        """
        self._client = client

    def query_works_as_admin(self) -> None:
        response = self._client.query(ADMIN_QUERY)
        _assert_equal(ADMIN_COLUMNS, response.columns, "columns for the administrator")
        _assert_equal(ADMIN_ROWS, response.rows, "rows for the administrator")

    def expect_matches_admin(self, admin_sql: str, user: str, user_sql: str) -> None:
        expected = self._client.query(admin_sql)
        actual = self._client.query(user_sql, run_as=user)
        _assert_same_result(expected, actual, user)

    def expect_scroll_matches_admin(self, admin_sql: str, user: str, user_sql: str) -> None:
        expected = self._client.query_all(admin_sql, fetch_size=SCROLL_FETCH_SIZE)
        actual = self._client.query_all(user_sql, run_as=user, fetch_size=SCROLL_FETCH_SIZE)
        _assert_same_result(expected, actual, user)

    def expect_describe(self, columns: Mapping[str, str], user: Optional[str]) -> None:
        response = self._client.query("DESCRIBE test", run_as=user)
        actual: Dict[str, Any] = {row[0]: row[1] for row in response.rows}
        _assert_equal(dict(columns), actual, f"DESCRIBE test for {_who(user)}")

    def expect_show_tables(self, tables: Sequence[str], user: Optional[str]) -> None:
        response = self._client.query("SHOW TABLES", run_as=user)
        actual: List[Any] = [row[0] for row in response.rows]
        _assert_equal(list(tables), actual, f"SHOW TABLES for {_who(user)}")

    def expect_forbidden(self, user: str, sql: str) -> None:
        try:
            self._client.query(sql, run_as=user)
        except SqlForbiddenError as exc:
            logger.info("%s was denied as expected: %s", user, exc.reason)
            return
        raise AssertionError(f"Expected [{sql}] to be forbidden for {user}")

    def expect_unknown_column(self, user: str, sql: str, column: str) -> None:
        try:
            self._client.query(sql, run_as=user)
        except UnknownColumnError as exc:
            _assert_equal(column, exc.column, f"unknown column reported for {user}")
            return
        raise AssertionError(
            f"Expected [{sql}] to fail for {user} with unknown column [{column}]"
        )


def _assert_same_result(expected: SqlResponse, actual: SqlResponse, user: str) -> None:
    _assert_equal(expected.columns, actual.columns, f"columns for {user}")
    _assert_equal(expected.rows, actual.rows, f"rows for {user}")


def _assert_equal(expected: Any, actual: Any, what: str) -> None:
    if expected != actual:
        raise AssertionError(f"Unexpected {what}: expected {expected!r} but was {actual!r}")


def _who(user: Optional[str]) -> str:
    return user or "the administrator"
