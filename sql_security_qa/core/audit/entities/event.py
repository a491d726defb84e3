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

"""Parsed audit event entity."""

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class AuditEvent:
    """Immutable record decoded from one audit log line.

    The timestamp is kept in its raw textual form so that a failing
    assertion can be traced back to the exact line in the file.

    Attributes:
        timestamp: Raw timestamp field.
        origin: Node that wrote the line.
        event_type: Event type, e.g. access_granted.
        origin_type: Layer the request came through (rest or transport).
        origin_address: Remote address of the request.
        principal: Effective user the action was authorized for.
        run_as_principal: User impersonated by ``principal``, if any.
        run_by_principal: User that impersonated ``principal``, if any.
        action: Transport action name.
        indices: Sorted, deduplicated index names.
        request: Request kind.
    """

    timestamp: str
    origin: str
    event_type: str
    origin_type: str
    origin_address: str
    principal: str
    run_as_principal: Optional[str]
    run_by_principal: Optional[str]
    action: str
    indices: Tuple[str, ...]
    request: str

    def describe(self) -> str:
        """Render the event as a single diagnostic line."""
        fields = [
            f"time={self.timestamp}",
            f"origin={self.origin}",
            f"event_type={self.event_type}",
            f"origin_type={self.origin_type}",
            f"origin_address={self.origin_address}",
            f"principal={self.principal}",
            f"run_as_principal={self.run_as_principal}",
            f"run_by_principal={self.run_by_principal}",
            f"action={self.action}",
            f"indices={list(self.indices)}",
            f"request={self.request}",
        ]
        return "{" + ", ".join(fields) + "}"
