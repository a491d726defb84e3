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

"""Shared state of one run of the SQL security suite."""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

from sql_security_qa.config import DEFAULT_HIDDEN_INDICES, HarnessConfig
from sql_security_qa.core.audit.repositories import AuditLogSource
from sql_security_qa.core.audit.services import IndicesNormalizer
from sql_security_qa.infra.audit_log_file import FileAuditLogSource

from .asserter import AuditLogAsserter

logger = logging.getLogger(__name__)


@dataclass
class AuditSuiteContext:
    """State shared by every test of a suite, owned by a class-scoped fixture.

    The audit log is never reset between tests, so once an audit assertion
    fails its leftovers can leak into the next test's window. The
    ``audit_failure`` latch records that and makes every later assertion
    fail fast until :meth:`reset` runs at suite teardown.

    Attributes:
        audit_log: Source of the shared audit log.
        admin_principal: Principal whose hidden indices are ignored.
        hidden_indices: Security-internal indices the SQL surface hides.
        audit_timeout: Seconds each assertion keeps polling the log.
        audit_failure: Set once any audit assertion failed.
        one_time_setup: Set once the fixture data has been written.
    """

    audit_log: AuditLogSource
    admin_principal: str = "test_admin"
    hidden_indices: Iterable[str] = DEFAULT_HIDDEN_INDICES
    audit_timeout: float = 10.0
    audit_failure: bool = False
    one_time_setup: bool = False
    normalizer: IndicesNormalizer = field(init=False)

    def __post_init__(self) -> None:
        """Build the normalizer for the configured admin principal."""
        self.hidden_indices = tuple(self.hidden_indices)
        self.normalizer = IndicesNormalizer(self.admin_principal, self.hidden_indices)

    @classmethod
    def from_config(cls, config: HarnessConfig) -> "AuditSuiteContext":
        """Create a context reading the configured audit log file."""
        return cls(
            audit_log=FileAuditLogSource(config.audit_log),
            admin_principal=config.admin_user,
            hidden_indices=config.hidden_indices,
            audit_timeout=config.audit_timeout,
        )

    def mark_failed(self) -> None:
        """Trip the latch after an audit assertion failed."""
        self.audit_failure = True

    def reset(self) -> None:
        """Clear per-suite state so another suite can reuse the context."""
        self.audit_failure = False
        self.one_time_setup = False

    def asserter(self, start_offset: Optional[int] = None) -> AuditLogAsserter:
        """Start an asserter session.

        Args:
            start_offset: Log size captured before the test ran. Defaults to
                the current size, which is only right when nothing has been
                done yet.

        Returns:
            A new asserter bound to this context.
        """
        if start_offset is None:
            start_offset = self.audit_log.current_offset()
        logger.debug("Starting audit session at offset %d", start_offset)
        return AuditLogAsserter(self, start_offset)
