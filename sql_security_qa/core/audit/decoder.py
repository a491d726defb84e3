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

"""Decoder for the security audit logfile format.

Each line looks like::

    [time] [origin] [event_type] origin_type=[..], origin_address=[..],
    principal=[..], (run_as_principal=[..], )(run_by_principal=[..], )
    action=[..], (indices=[a,b], )request=[..]

Whitespace between fields is free-form; any other deviation is an error.
"""

import re
from typing import Optional, Tuple

from .entities import AuditEvent
from .exceptions import AuditLogParseError
from .value_objects import sorted_indices

_PART = r"\[([^\]]*)\]"

_LOG_PATTERN = re.compile(
    (
        r"PART PART PART origin_type=PART, origin_address=PART, "
        r"principal=PART, (?:run_as_principal=PART, )?(?:run_by_principal=PART, )?"
        r"action=\[(.*?)\], (?:indices=PART, )?request=PART"
    )
    .replace(" ", r"\s+")
    .replace(",", r"\s*,")
    .replace("=", r"\s*=\s*")
    .replace("PART", _PART)
)


class AuditLogDecoder:
    """Decodes raw audit log lines into :class:`AuditEvent` records.

    Decoding is pure: the same line always yields an equal event.
    """

    def decode(self, line: str) -> AuditEvent:
        """Decode one log line.

        Args:
            line: A single line without its terminator.

        Returns:
            The decoded event with indices split, trimmed and sorted.

        Raises:
            AuditLogParseError: If the line does not match the format.
        """
        match = _LOG_PATTERN.fullmatch(line.strip())
        if match is None:
            raise AuditLogParseError(line)

        (
            timestamp,
            origin,
            event_type,
            origin_type,
            origin_address,
            principal,
            run_as_principal,
            run_by_principal,
            action,
            indices,
            request,
        ) = match.groups()

        return AuditEvent(
            timestamp=timestamp,
            origin=origin,
            event_type=event_type,
            origin_type=origin_type,
            origin_address=origin_address,
            principal=principal,
            run_as_principal=run_as_principal,
            run_by_principal=run_by_principal,
            action=action,
            indices=split_indices(indices),
            request=request,
        )


def split_indices(raw: Optional[str]) -> Tuple[str, ...]:
    """Split a comma separated indices field into a sorted tuple.

    Blank entries are dropped, so a missing field and ``[]`` both decode
    to an empty tuple.
    """
    if not raw:
        return ()
    return sorted_indices(
        name.strip() for name in raw.split(",") if name.strip()
    )
