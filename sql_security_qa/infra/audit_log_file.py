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

"""File-backed audit log source.

The audit log is shared by every test in a run and is never truncated, so
each test remembers the byte size of the file before it started and only
reads what was appended afterwards.
"""

import logging
from pathlib import Path
from typing import List, Union

from sql_security_qa.core.audit.exceptions import AuditLogOffsetError
from sql_security_qa.core.audit.repositories import AuditLogSource

logger = logging.getLogger(__name__)


class FileAuditLogSource(AuditLogSource):
    """Tails an append-only audit log file by byte offset."""

    def __init__(self, path: Union[str, Path], encoding: str = "utf-8") -> None:
        """Initialize the source.

        Args:
            path: Location of the audit log file.
            encoding: Text encoding of the log.
        """
        self.path = Path(path)
        self.encoding = encoding

    def current_offset(self) -> int:
        """Return the size of the log in bytes.

        Returns:
            Current size, or 0 when the file does not exist yet.

        Raises:
            ValueError: If the path exists but is not a regular file.
        """
        if not self.path.exists():
            return 0
        if not self.path.is_file():
            raise ValueError(
                f"expected audit log [{self.path}] to be a plain file but wasn't"
            )
        return self.path.stat().st_size

    def read_lines_since(self, offset: int) -> List[str]:
        """Return complete lines appended after ``offset``.

        Args:
            offset: Byte offset captured before the test ran.

        Returns:
            Decoded lines without terminators. Lines are split on newlines
            only; blank lines are returned so the decoder rejects them.

        Raises:
            AuditLogOffsetError: If the file is shorter than ``offset``.
        """
        if not self.path.exists():
            logger.debug("Audit log %s does not exist yet", self.path)
            return []

        with self.path.open("rb") as log_file:
            size = log_file.seek(0, 2)
            if size < offset:
                raise AuditLogOffsetError(offset=offset, size=size)
            log_file.seek(offset)
            data = log_file.read()

        # The writer may be mid-line; leave the partial line for the next read.
        end = data.rfind(b"\n")
        if end < 0:
            return []
        return [
            raw.rstrip(b"\r").decode(self.encoding)
            for raw in data[:end].split(b"\n")
        ]
