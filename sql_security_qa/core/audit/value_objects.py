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

"""Value objects for the audit domain.

All value objects are immutable and defined by their values, not identity.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Protocol, Tuple

from .exceptions import UnknownActionError


class EventType(str, Enum):
    """Audit event types the asserter cares about.

    Every other event type written to the log (authentication, run-as,
    tampered requests, ...) is noise and is dropped before matching.
    """

    ACCESS_GRANTED = "access_granted"
    ACCESS_DENIED = "access_denied"

    @classmethod
    def for_outcome(cls, granted: bool) -> "EventType":
        """Map an authorization outcome to its event type."""
        return cls.ACCESS_GRANTED if granted else cls.ACCESS_DENIED

    @classmethod
    def is_monitored(cls, value: str) -> bool:
        """Return True if ``value`` is one of the monitored event types."""
        return value in {member.value for member in cls}


class MonitoredAction(str, Enum):
    """Transport actions audited by the SQL feature.

    Attributes:
        SQL: Query execution, authorized once up front and again per index.
        SQL_TABLES: Index resolution used by DESCRIBE and SHOW TABLES.
    """

    SQL = "indices:data/read/sql"
    SQL_TABLES = "indices:data/read/sql/tables"

    @property
    def request_kind(self) -> str:
        """Name of the request class logged alongside this action."""
        return _REQUEST_KINDS[self]

    @classmethod
    def parse(cls, name: str) -> "MonitoredAction":
        """Resolve an action name.

        Raises:
            UnknownActionError: If the action is not monitored.
        """
        try:
            return cls(name)
        except ValueError as exc:
            raise UnknownActionError(name) from exc

    @classmethod
    def is_monitored(cls, name: str) -> bool:
        """Return True if ``name`` is one of the monitored actions."""
        return name in {member.value for member in cls}


_REQUEST_KINDS = {
    MonitoredAction.SQL: "SqlRequest",
    MonitoredAction.SQL_TABLES: "Request",
}


class IndicesMatcher(Protocol):
    """Predicate over the normalized (sorted) indices of an event."""

    def matches(self, indices: Tuple[str, ...]) -> bool:
        """Return True if the indices satisfy this matcher."""
        ...


@dataclass(frozen=True)
class EmptyIndices:
    """Matches events that carry no indices at all."""

    def matches(self, indices: Tuple[str, ...]) -> bool:
        return len(indices) == 0

    def __str__(self) -> str:
        return "an empty collection"


@dataclass(frozen=True)
class HasItems:
    """Matches events whose indices include every expected name.

    Attributes:
        items: Names that must all be present; others may be too.
    """

    items: Tuple[str, ...]

    def matches(self, indices: Tuple[str, ...]) -> bool:
        present = set(indices)
        return all(item in present for item in self.items)

    def __str__(self) -> str:
        return f"a collection containing {list(self.items)}"


@dataclass(frozen=True)
class ContainsExactly:
    """Matches events whose sorted indices equal ``items`` in order.

    Attributes:
        items: The complete expected sequence.
    """

    items: Tuple[str, ...]

    def matches(self, indices: Tuple[str, ...]) -> bool:
        return tuple(indices) == self.items

    def __str__(self) -> str:
        return f"exactly {list(self.items)}"


def empty() -> EmptyIndices:
    """Matcher for an event without indices."""
    return EmptyIndices()


def has_items(*items: str) -> HasItems:
    """Matcher for an event whose indices include all ``items``."""
    return HasItems(tuple(items))


def contains(*items: str) -> ContainsExactly:
    """Matcher for an event whose indices are exactly ``items``, in order."""
    return ContainsExactly(tuple(items))


def sorted_indices(names: Iterable[str]) -> Tuple[str, ...]:
    """Deduplicate and sort index names for deterministic reporting."""
    return tuple(sorted(set(names)))
