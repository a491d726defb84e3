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

"""Port interfaces (Protocols) for the audit domain.

These define the contracts that infrastructure implementations must satisfy.
"""

from typing import List, Protocol


class AuditLogSource(Protocol):
    """Read access to the shared, append-only audit log."""

    def current_offset(self) -> int:
        """Return how many bytes the log currently holds.

        Returns:
            Size of the log in bytes, 0 if it does not exist yet.
        """
        ...

    def read_lines_since(self, offset: int) -> List[str]:
        """Return every complete line appended after ``offset``.

        Args:
            offset: Byte offset recorded earlier by :meth:`current_offset`.

        Returns:
            Lines without terminators, in file order. A trailing line that
            has not been terminated yet is not returned.

        Raises:
            AuditLogOffsetError: If the log is now shorter than ``offset``.
        """
        ...
