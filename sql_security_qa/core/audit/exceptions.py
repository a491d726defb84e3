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

"""Domain exceptions for audit log assertions."""

from typing import Optional, Sequence


class AuditDomainError(Exception):
    """Base exception for all audit domain errors."""

    def __init__(self, message: str, principal: Optional[str] = None) -> None:
        """Initialize domain error.

        Args:
            message: Human-readable error description.
            principal: Optional principal the error relates to.
        """
        super().__init__(message)
        self.message = message
        self.principal = principal


class AuditLogParseError(AuditDomainError, ValueError):
    """A log line does not have the expected structure."""

    def __init__(self, line: str) -> None:
        """Initialize parse error.

        Args:
            line: The offending log line.
        """
        super().__init__(f"Unrecognized log: {line}")
        self.line = line


class UnknownActionError(AuditDomainError, ValueError):
    """An expectation names an action that is not monitored."""

    def __init__(self, action: str) -> None:
        """Initialize unknown action error.

        Args:
            action: The action name that was requested.
        """
        super().__init__(f"Unknown action [{action}]")
        self.action = action


class AuditLogOffsetError(AuditDomainError):
    """The audit log is shorter than the offset recorded at test start."""

    def __init__(self, offset: int, size: int) -> None:
        """Initialize offset error.

        Args:
            offset: Byte offset recorded before the test ran.
            size: Current size of the log file in bytes.
        """
        super().__init__(
            f"Audit log shrank below the recorded offset: "
            f"offset {offset}, size {size}"
        )
        self.offset = offset
        self.size = size


class AuditLatchTrippedError(AuditDomainError, AssertionError):
    """A previous test already failed an audit assertion."""

    def __init__(self) -> None:
        """Initialize latch error."""
        super().__init__(
            "Previous test had an audit-related failure. All subsequent audit "
            "related assertions are bogus because we can't guarantee that we "
            "fully cleaned up after the last test."
        )


class AuditSessionClosedError(AuditDomainError):
    """An asserter session was reused after verification."""

    def __init__(self) -> None:
        """Initialize closed session error."""
        super().__init__(
            "Audit log asserter already verified; create a new one per test"
        )


class AuditLogMismatchError(AuditDomainError, AssertionError):
    """Declared expectations and observed events are not a bijection."""

    def __init__(
        self,
        unmatched: Sequence[int],
        descriptions: Sequence[str],
        all_logs: Sequence[str],
        remaining_logs: Sequence[str],
    ) -> None:
        """Initialize mismatch error.

        Args:
            unmatched: Indices of expectations that matched no event.
            descriptions: Description of every declared expectation.
            all_logs: Every relevant event read in the window.
            remaining_logs: Events left over after matching.
        """
        if unmatched:
            checkers = "".join(
                f"\n  [{index}] {descriptions[index]}" for index in unmatched
            )
            message = (
                f"Some checkers {list(unmatched)} didn't match any logs:{checkers}"
                f"\nAll logs:{_render(all_logs)}"
                f"\nRemaining logs:{_render(remaining_logs)}"
            )
        else:
            message = f"Not all logs matched. Unmatched logs:{_render(remaining_logs)}"
        super().__init__(message)
        self.unmatched = list(unmatched)
        self.all_logs = list(all_logs)
        self.remaining_logs = list(remaining_logs)


def _render(logs: Sequence[str]) -> str:
    return "".join(f"\n{log}" for log in logs)
