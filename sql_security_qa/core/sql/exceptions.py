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

"""Exceptions raised by the SQL REST client.

Forbidden and unknown-column failures are outcomes scenarios assert on;
everything else is an unexpected failure of the system under test.
"""

from typing import Any, Optional


class SqlClientError(Exception):
    """Base exception for all SQL client errors."""

    def __init__(self, message: str, principal: Optional[str] = None) -> None:
        """Initialize client error.

        Args:
            message: Human-readable error description.
            principal: User the request ran as, if not the administrator.
        """
        super().__init__(message)
        self.message = message
        self.principal = principal


class SqlForbiddenError(SqlClientError):
    """The security layer denied the request (403-class response)."""

    def __init__(self, reason: str, principal: Optional[str] = None) -> None:
        """Initialize forbidden error.

        Args:
            reason: Reason reported by the cluster.
            principal: User the request ran as.
        """
        super().__init__(f"Forbidden: {reason}", principal=principal)
        self.reason = reason


class UnknownColumnError(SqlClientError):
    """The query references a column that is not visible to the user."""

    def __init__(self, column: str, reason: str, principal: Optional[str] = None) -> None:
        """Initialize unknown column error.

        Args:
            column: Column name the cluster could not resolve.
            reason: Full reason reported by the cluster.
            principal: User the request ran as.
        """
        super().__init__(f"Unknown column [{column}]: {reason}", principal=principal)
        self.column = column
        self.reason = reason


class SqlRequestError(SqlClientError):
    """The cluster answered with an unexpected error response."""

    def __init__(
        self,
        status_code: int,
        body: Any,
        principal: Optional[str] = None,
    ) -> None:
        """Initialize request error.

        Args:
            status_code: HTTP status of the response.
            body: Decoded response body, or raw text if it was not JSON.
            principal: User the request ran as.
        """
        super().__init__(
            f"Request failed with status {status_code}: {body}",
            principal=principal,
        )
        self.status_code = status_code
        self.body = body


class SqlTransportError(SqlClientError):
    """The request never produced a response."""
