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

"""Expectation predicate entity."""

from dataclasses import dataclass

from ..value_objects import EventType, IndicesMatcher
from .event import AuditEvent


@dataclass(frozen=True)
class ExpectationPredicate:
    """One audit event a test declares it expects to see.

    Each predicate must be satisfied by exactly one observed event.

    Attributes:
        granted: True for access_granted, False for access_denied.
        action: Expected action name.
        principal: Expected effective principal.
        indices_matcher: Matcher applied to the event's sorted indices.
        request: Expected request kind.
    """

    granted: bool
    action: str
    principal: str
    indices_matcher: IndicesMatcher
    request: str

    @property
    def event_type(self) -> str:
        """Event type this predicate expects."""
        return EventType.for_outcome(self.granted).value

    def matches(self, event: AuditEvent) -> bool:
        """Return True if ``event`` satisfies every field of this predicate."""
        return (
            event.event_type == self.event_type
            and event.action == self.action
            and event.principal == self.principal
            and self.indices_matcher.matches(event.indices)
            and event.request == self.request
        )

    def describe(self) -> str:
        """Render the predicate for failure messages."""
        return (
            f"{self.event_type} action={self.action} principal={self.principal} "
            f"indices={self.indices_matcher} request={self.request}"
        )
