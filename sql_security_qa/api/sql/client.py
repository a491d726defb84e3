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

"""REST client for the cluster's SQL, user and index endpoints.

Every request authenticates as the administrator. Requests on behalf of a
less privileged user impersonate it with the run-as header, which is how
the audit trail ends up attributing them to that user.
"""

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

import httpx

from sql_security_qa.config import HarnessConfig
from sql_security_qa.core.sql.exceptions import (
    SqlForbiddenError,
    SqlRequestError,
    SqlTransportError,
    UnknownColumnError,
)

logger = logging.getLogger(__name__)

RUN_AS_HEADER = "es-security-runas-user"
SQL_URL = "/_xpack/sql"
USER_URL = "/_xpack/security/user/{name}"
BULK_URL = "/_bulk"

_UNKNOWN_COLUMN = re.compile(r"Unknown column \[([^\]]+)\]")


@dataclass(frozen=True)
class SqlResponse:
    """One page of a SQL response.

    Attributes:
        columns: ``(name, type)`` pairs; empty on cursor continuation pages.
        rows: Row values in column order.
        cursor: Continuation token, None on the last page.
    """

    columns: List[Tuple[str, str]] = field(default_factory=list)
    rows: List[List[Any]] = field(default_factory=list)
    cursor: Optional[str] = None

    @staticmethod
    def from_json(body: Mapping[str, Any]) -> "SqlResponse":
        """Create a response from the decoded JSON body."""
        return SqlResponse(
            columns=[(column["name"], column["type"]) for column in body.get("columns", [])],
            rows=[list(row) for row in body.get("rows", [])],
            cursor=body.get("cursor") or None,
        )


class SqlRestClient:
    """Client for the SQL REST surface of the system under test."""

    def __init__(
        self,
        http_client: httpx.Client,
        admin_user: str,
        admin_password: str,
    ) -> None:
        """Initialize the client.

        Args:
            http_client: Client bound to the cluster's base URL.
            admin_user: Administrative user to authenticate as.
            admin_password: Password of ``admin_user``.
        """
        self._http = http_client
        self._auth = httpx.BasicAuth(admin_user, admin_password)
        self.admin_user = admin_user

    @classmethod
    def from_config(cls, config: HarnessConfig, timeout: float = 30.0) -> "SqlRestClient":
        """Create a client that owns its own connection pool."""
        return cls(
            httpx.Client(base_url=config.base_url, timeout=timeout),
            admin_user=config.admin_user,
            admin_password=config.admin_password,
        )

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._http.close()

    def __enter__(self) -> "SqlRestClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def query(
        self,
        sql: str,
        run_as: Optional[str] = None,
        fetch_size: Optional[int] = None,
    ) -> SqlResponse:
        """Run a SQL statement and return the first page.

        Args:
            sql: Statement to execute.
            run_as: User to impersonate; None runs as the administrator.
            fetch_size: Page size; the server default when None.

        Returns:
            The first page of results.

        Raises:
            SqlForbiddenError: If the security layer denied the request.
            UnknownColumnError: If a referenced column is not visible.
            SqlRequestError: For any other error response.
            SqlTransportError: If no response was received.
        """
        body: Dict[str, Any] = {"query": sql}
        if fetch_size is not None:
            body["fetch_size"] = fetch_size
        return SqlResponse.from_json(self._sql(body, run_as))

    def next_page(self, cursor: str, run_as: Optional[str] = None) -> SqlResponse:
        """Fetch the page following ``cursor``."""
        return SqlResponse.from_json(self._sql({"cursor": cursor}, run_as))

    def query_all(
        self,
        sql: str,
        run_as: Optional[str] = None,
        fetch_size: Optional[int] = None,
    ) -> SqlResponse:
        """Run a statement and drain every page.

        Returns:
            A single response holding the first page's columns and the rows
            of all pages, in order.
        """
        first = self.query(sql, run_as=run_as, fetch_size=fetch_size)
        rows = list(first.rows)
        cursor = first.cursor
        while cursor:
            page = self.next_page(cursor, run_as=run_as)
            rows.extend(page.rows)
            cursor = page.cursor
        return SqlResponse(columns=first.columns, rows=rows, cursor=None)

    def create_user(self, name: str, password: str, roles: Iterable[str]) -> None:
        """Create or update a native user.

        Args:
            name: User name.
            password: Password for the user.
            roles: Role names to assign.
        """
        role_names = list(roles)
        logger.info("Creating user %s with roles %s", name, role_names)
        self._request(
            "PUT",
            USER_URL.format(name=name),
            json={"password": password, "roles": role_names},
        )

    def bulk(self, actions: Iterable[Mapping[str, Any]], refresh: bool = True) -> None:
        """Send a bulk request built from alternating action and source lines."""
        payload = "".join(json.dumps(action) + "\n" for action in actions)
        self._request(
            "PUT",
            BULK_URL,
            params={"refresh": "true"} if refresh else None,
            content=payload.encode("utf-8"),
            headers={"Content-Type": "application/x-ndjson"},
        )

    def delete_all_indices(self) -> None:
        """Delete every index, treating 404 as "nothing to delete"."""
        try:
            self._request("DELETE", "/*")
        except SqlRequestError as exc:
            if exc.status_code != 404:
                raise
            logger.info("No indices to delete")

    def _sql(self, body: Dict[str, Any], run_as: Optional[str]) -> Dict[str, Any]:
        headers = {RUN_AS_HEADER: run_as} if run_as else None
        response = self._request(
            "POST",
            SQL_URL,
            params={"format": "json"},
            json=body,
            headers=headers,
            principal=run_as,
        )
        return response.json()

    def _request(
        self,
        method: str,
        url: str,
        principal: Optional[str] = None,
        **kwargs: Any,
    ) -> httpx.Response:
        logger.debug("%s %s (run as %s)", method, url, principal or self.admin_user)
        try:
            response = self._http.request(method, url, auth=self._auth, **kwargs)
        except httpx.RequestError as exc:
            raise SqlTransportError(
                f"{method} {url} failed: {exc}", principal=principal
            ) from exc

        if response.is_success:
            return response
        raise classify_error(response, principal)


def classify_error(response: httpx.Response, principal: Optional[str] = None) -> Exception:
    """Map an error response to the matching client exception.

    Args:
        response: Non-successful response.
        principal: User the request ran as.

    Returns:
        The exception to raise.
    """
    try:
        body: Any = response.json()
    except ValueError:
        body = response.text

    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict):
        error_type = error.get("type", "")
        reason = error.get("reason", "")
    else:
        error_type = ""
        reason = str(error or body)

    if response.status_code == 403 or error_type == "security_exception":
        return SqlForbiddenError(reason, principal=principal)

    unknown_column = _UNKNOWN_COLUMN.search(reason)
    if unknown_column:
        return UnknownColumnError(unknown_column.group(1), reason, principal=principal)

    return SqlRequestError(response.status_code, body, principal=principal)
