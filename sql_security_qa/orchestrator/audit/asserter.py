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

"""AuditLogAsserter session implementation."""

import logging
import time
from enum import Enum
from typing import TYPE_CHECKING, Callable, List, Optional

from sql_security_qa.core.audit.decoder import AuditLogDecoder
from sql_security_qa.core.audit.entities import AuditEvent, ExpectationPredicate
from sql_security_qa.core.audit.exceptions import (
    AuditLatchTrippedError,
    AuditLogMismatchError,
    AuditSessionClosedError,
)
from sql_security_qa.core.audit.services import EventMatcher, is_relevant
from sql_security_qa.core.audit.value_objects import (
    IndicesMatcher,
    MonitoredAction,
    contains,
    empty,
    has_items,
)

if TYPE_CHECKING:
    from .context import AuditSuiteContext

logger = logging.getLogger(__name__)

INITIAL_BACKOFF_SECONDS = 0.001
MAX_BACKOFF_SECONDS = 1.0


class SessionState(str, Enum):
    """Lifecycle of an asserter session."""

    ACCUMULATING = "ACCUMULATING"
    CONFIRMED = "CONFIRMED"
    FAILED = "FAILED"


class AuditLogAsserter:
    """Asserts the audit events a test produced.

    Expectations are matched in any order because the system under test
    may log concurrent authorization checks in any order, but each
    expectation must consume exactly one event and every relevant event
    must be consumed.

    Usage::

        context.asserter(offset) \\
            .expect_sql_with_sync_lookup("test_admin", "test") \\
            .expect(False, MonitoredAction.SQL, "no_access", empty()) \\
            .assert_logs()
    """

    def __init__(
        self,
        context: "AuditSuiteContext",
        start_offset: int,
        decoder: Optional[AuditLogDecoder] = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialize the session.

        Args:
            context: Suite context holding the log source and the latch.
            start_offset: Log size captured before the test ran.
            decoder: Line decoder; a default one when not provided.
            clock: Monotonic clock used for the retry deadline.
            sleep: Sleep function used between retries.
        """
        self._context = context
        self._start_offset = start_offset
        self._decoder = decoder or AuditLogDecoder()
        self._clock = clock
        self._sleep = sleep
        self._expectations: List[ExpectationPredicate] = []
        self.state = SessionState.ACCUMULATING

    @property
    def expectations(self) -> List[ExpectationPredicate]:
        """Expectations declared so far, in declaration order."""
        return list(self._expectations)

    def expect(
        self,
        granted: bool,
        action: str,
        principal: str,
        indices_matcher: IndicesMatcher,
        request: Optional[str] = None,
    ) -> "AuditLogAsserter":
        """Declare one expected event.

        Args:
            granted: True for access_granted, False for access_denied.
            action: Monitored action name.
            principal: Effective principal of the event.
            indices_matcher: Matcher for the event's indices.
            request: Request kind; defaults to the action's request kind.

        Returns:
            This asserter, for chaining.

        Raises:
            UnknownActionError: If ``action`` is not monitored.
            AuditSessionClosedError: If the session was already verified.
        """
        self._ensure_accumulating()
        monitored = MonitoredAction.parse(action)
        self._expectations.append(
            ExpectationPredicate(
                granted=granted,
                action=monitored.value,
                principal=principal,
                indices_matcher=indices_matcher,
                request=request if request is not None else monitored.request_kind,
            )
        )
        return self

    def expect_sql_with_sync_lookup(self, user: str, *indices: str) -> "AuditLogAsserter":
        """Expect a query that is authorized once, then once per index."""
        self.expect(True, MonitoredAction.SQL, user, empty())
        for index in indices:
            self.expect(True, MonitoredAction.SQL, user, has_items(index))
        return self

    def expect_sql_with_async_lookup(self, user: str, *indices: str) -> "AuditLogAsserter":
        """Expect a query that resolves all indices up front.

        DESCRIBE and SHOW TABLES first authorize the query, then resolve the
        full index set through the tables action, then authorize each index.
        """
        self.expect(True, MonitoredAction.SQL, user, empty())
        self.expect(True, MonitoredAction.SQL_TABLES, user, contains(*indices))
        for index in indices:
            self.expect(True, MonitoredAction.SQL, user, has_items(index))
        return self

    def assert_logs(self) -> None:
        """Verify the log, polling until it matches or the timeout expires.

        Raises:
            AuditLatchTrippedError: If an earlier assertion already failed.
            AuditLogParseError: If a new line is malformed; not retried.
            AuditLogOffsetError: If the log shrank; not retried.
            AuditLogMismatchError: If the events never matched.
        """
        self._ensure_accumulating()
        if self._context.audit_failure:
            self.state = SessionState.FAILED
            raise AuditLatchTrippedError()

        deadline = self._clock() + self._context.audit_timeout
        backoff = INITIAL_BACKOFF_SECONDS
        try:
            while True:
                try:
                    self._check_once()
                    break
                except AuditLogMismatchError:
                    remaining = deadline - self._clock()
                    if remaining <= 0:
                        raise
                    logger.debug("Audit logs not matched yet, retrying in %.3fs", backoff)
                    self._sleep(min(backoff, remaining))
                    backoff = min(backoff * 2, MAX_BACKOFF_SECONDS)
        except AuditLogMismatchError:
            self.state = SessionState.FAILED
            self._context.mark_failed()
            logger.warning(
                "Failed to find an audit log. Skipping remaining tests in this "
                "suite because the missing audit logs could turn up later."
            )
            raise
        except Exception:
            self.state = SessionState.FAILED
            raise

        self.state = SessionState.CONFIRMED

    def _check_once(self) -> None:
        events = self._read_events()
        result = EventMatcher.match(self._expectations, events)
        if result.is_bijection:
            return
        raise AuditLogMismatchError(
            unmatched=result.unmatched,
            descriptions=[expectation.describe() for expectation in self._expectations],
            all_logs=[event.describe() for event in events],
            remaining_logs=[event.describe() for event in result.remaining],
        )

    def _read_events(self) -> List[AuditEvent]:
        lines = self._context.audit_log.read_lines_since(self._start_offset)
        events = []
        for line in lines:
            event = self._decoder.decode(line)
            if is_relevant(event):
                events.append(self._context.normalizer.normalize(event))
        return events

    def _ensure_accumulating(self) -> None:
        if self.state is not SessionState.ACCUMULATING:
            raise AuditSessionClosedError()
