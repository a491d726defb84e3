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

"""Domain services for the audit domain."""

from dataclasses import dataclass, replace
from typing import Dict, FrozenSet, Iterable, List, Sequence, Set

from .entities import AuditEvent, ExpectationPredicate
from .value_objects import EventType, MonitoredAction


def is_relevant(event: AuditEvent) -> bool:
    """Return True for access events on a monitored action.

    Other subsystems write to the same log; everything else is noise.
    """
    return EventType.is_monitored(event.event_type) and MonitoredAction.is_monitored(
        event.action
    )


class IndicesNormalizer:
    """Removes hidden indices from events of the administrative principal.

    The administrator may incidentally touch security-internal indices that
    the SQL surface never exposes, so those names are dropped before
    matching. Other principals are left untouched.

    Attributes:
        admin_principal: Principal whose events are normalized.
        hidden_indices: Index names to drop for that principal.
    """

    def __init__(self, admin_principal: str, hidden_indices: Iterable[str]) -> None:
        self.admin_principal = admin_principal
        self.hidden_indices: FrozenSet[str] = frozenset(hidden_indices)

    def normalize(self, event: AuditEvent) -> AuditEvent:
        """Return ``event`` with hidden indices removed when applicable."""
        if event.principal != self.admin_principal or not self.hidden_indices:
            return event
        visible = tuple(
            name for name in event.indices if name not in self.hidden_indices
        )
        if visible == event.indices:
            return event
        return replace(event, indices=visible)


@dataclass(frozen=True)
class MatchResult:
    """Outcome of matching expectations against events.

    Attributes:
        unmatched: Positions of expectations that found no event.
        remaining: Events no expectation consumed.
    """

    unmatched: List[int]
    remaining: List[AuditEvent]

    @property
    def is_bijection(self) -> bool:
        """True when every expectation and every event were paired."""
        return not self.unmatched and not self.remaining


class EventMatcher:
    """Unordered one-to-one matching of expectations to events.

    Authorization checks for concurrently executed components may be logged
    in any order, so only the multiset of events is compared. A loose
    matcher such as ``has_items`` can accept several events, so a first-fit
    scan may strand a later expectation even though a pairing exists.
    Expectations are placed along augmenting paths: an event
    already claimed is handed over when its owner can move to another
    candidate. The match is a bijection whenever one exists.
    """

    @staticmethod
    def match(
        expectations: Sequence[ExpectationPredicate],
        events: Sequence[AuditEvent],
    ) -> MatchResult:
        """Pair each expectation with one event.

        Args:
            expectations: Declared expectations, in declaration order.
            events: Relevant, normalized events read from the log.

        Returns:
            MatchResult listing unmatched expectations and leftover events,
            the latter in log order.
        """
        candidates = [
            [position for position, event in enumerate(events) if expectation.matches(event)]
            for expectation in expectations
        ]
        owners: Dict[int, int] = {}

        def _place(expectation: int, visited: Set[int]) -> bool:
            for event in candidates[expectation]:
                if event in visited:
                    continue
                visited.add(event)
                if event not in owners or _place(owners[event], visited):
                    owners[event] = expectation
                    return True
            return False

        unmatched = [
            position for position in range(len(expectations)) if not _place(position, set())
        ]
        remaining = [event for position, event in enumerate(events) if position not in owners]
        return MatchResult(unmatched=unmatched, remaining=remaining)
