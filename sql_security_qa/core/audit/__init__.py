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

"""Audit domain module for the SQL security harness."""

from .decoder import AuditLogDecoder
from .entities import AuditEvent, ExpectationPredicate
from .exceptions import (
    AuditDomainError,
    AuditLatchTrippedError,
    AuditLogMismatchError,
    AuditLogOffsetError,
    AuditLogParseError,
    AuditSessionClosedError,
    UnknownActionError,
)
from .repositories import AuditLogSource
from .services import EventMatcher, IndicesNormalizer, MatchResult, is_relevant
from .value_objects import (
    ContainsExactly,
    EmptyIndices,
    EventType,
    HasItems,
    IndicesMatcher,
    MonitoredAction,
    contains,
    empty,
    has_items,
)

__all__ = [
    "AuditLogDecoder",
    "AuditEvent",
    "ExpectationPredicate",
    "AuditDomainError",
    "AuditLatchTrippedError",
    "AuditLogMismatchError",
    "AuditLogOffsetError",
    "AuditLogParseError",
    "AuditSessionClosedError",
    "UnknownActionError",
    "AuditLogSource",
    "EventMatcher",
    "IndicesNormalizer",
    "MatchResult",
    "is_relevant",
    "ContainsExactly",
    "EmptyIndices",
    "EventType",
    "HasItems",
    "IndicesMatcher",
    "MonitoredAction",
    "contains",
    "empty",
    "has_items",
]
