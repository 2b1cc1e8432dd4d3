# =============================================================================
# maintenance_core/services/job_numbering.py
# Job Running Id Helpers
# =============================================================================
"""
Job running ids look like MTN03001/69:

    {prefix}{MM}{seq:03d}/{YY}

prefix comes from the settings' idMappings for the job type, MM is the month
the job was received and YY the last two digits of the Buddhist year.
Sequences count up per (prefix, month, year).
"""

from __future__ import annotations
import re
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional, Union

from maintenance_core.data.constants import BUDDHIST_ERA_OFFSET, DEFAULT_JOB_PREFIX
from maintenance_core.errors import SequenceAllocationError

_LEADING_DIGITS = re.compile(r"\s*(\d+)")


def thai_year(value: Union[date, int]) -> int:
    """Buddhist-era year for a date or a Gregorian year."""
    year = value if isinstance(value, int) else value.year
    return year + BUDDHIST_ERA_OFFSET


def parse_date_received(value: Union[str, date, datetime], job_type: Optional[str] = None) -> date:
    """Accepts a date, a datetime or an ISO string ("2026-03-15", "2026-03-15T08:30:00")."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        raise SequenceAllocationError(
            f"Cannot read date received: {value!r}",
            job_type=job_type,
            date_received=str(value),
        ) from None


def prefix_for(id_mappings: Optional[Iterable[Dict[str, Any]]], job_type: str) -> str:
    for mapping in id_mappings or ():
        if mapping.get("category") == job_type:
            return mapping.get("prefix") or DEFAULT_JOB_PREFIX
    return DEFAULT_JOB_PREFIX


def id_head(prefix: str, received: date) -> str:
    return f"{prefix}{received.month:02d}"


def id_tail(received: date) -> str:
    return f"/{str(thai_year(received))[-2:]}"


def extract_sequence(running_id: Optional[str], head: str, tail: str) -> Optional[int]:
    """
    Sequence number of running_id within (head, tail), or None.

    Ids that do not follow the fixed pattern still count with the leading
    digits of their middle part ("MTN0307A/69" -> 7).
    """
    if not running_id or not running_id.startswith(head) or not running_id.endswith(tail):
        return None
    if len(running_id) < len(head) + len(tail):
        return None
    middle = running_id[len(head):len(running_id) - len(tail)]
    match = _LEADING_DIGITS.match(middle)
    return int(match.group(1)) if match else None


def next_job_id(
    prefix: str,
    date_received: Union[str, date, datetime],
    existing_ids: Iterable[Optional[str]],
    job_type: Optional[str] = None,
) -> str:
    """
    Next free running id for prefix in the month of date_received.

    Not atomic: the caller reads existing ids, then saves. Two writers can
    allocate the same id; see MaintenanceDataService.fix_duplicate_job_ids.
    """
    received = parse_date_received(date_received, job_type)
    head = id_head(prefix, received)
    tail = id_tail(received)

    sequences: List[int] = [
        seq for seq in (extract_sequence(i, head, tail) for i in existing_ids)
        if seq is not None
    ]
    next_seq = max(sequences, default=0) + 1
    return f"{head}{next_seq:03d}{tail}"
