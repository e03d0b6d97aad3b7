"""
Utility functions for turning posted entry forms into submissions.
"""

# Standard library imports
from collections.abc import Mapping
from datetime import datetime
from typing import Any

# Local application imports
from entryform.models import Participant, Submission

FORM_DATE_FORMAT = '%d.%m.%Y'


def pick(value: Any) -> str:
    """
    Coerce a raw form value to a trimmed string.

    Args:
        value: Anything taken from the posted JSON.

    JSON booleans become 'true'/'false' and integral numbers lose the
    trailing '.0', so a birth year posted as 2012.0 reads '2012'.

    Returns:
        str: '' for missing values, otherwise the stripped string form.
    """
    if value is None:
        return ''
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def today_for_form(now: datetime = None) -> str:
    """Current date in the DD.MM.YYYY format used on the printed form."""
    return (now or datetime.now()).strftime(FORM_DATE_FORMAT)


def normalize_participants(raw: Any) -> tuple:
    """
    Build the ordered participant tuple.

    Ordinals are always the 1-based position in the posted list; any
    ``idx`` sent by the client is ignored.
    """
    if not isinstance(raw, (list, tuple)):
        return ()

    participants = []
    for position, entry in enumerate(raw, start=1):
        if not isinstance(entry, Mapping):
            entry = {}
        participants.append(Participant(
            idx=position,
            name=pick(entry.get('name')),
            birth_year=pick(entry.get('birthYear')),
            has_rank=pick(entry.get('hasRank')),
            performing_rank=pick(entry.get('performingRank')),
            medical_visa=pick(entry.get('medicalVisa')),
        ))
    return tuple(participants)


def normalize_submission(raw: Any, now: datetime = None) -> Submission:
    """
    Normalize an untrusted form payload into a Submission.

    Never raises: anything missing or of the wrong type degrades to an empty
    string or an empty participant list.

    Args:
        raw: Decoded JSON body (may be None or any other type).
        now: Optional clock value used for the default form date.

    Returns:
        Submission: The canonical record for this request.
    """
    if not isinstance(raw, Mapping):
        raw = {}

    return Submission(
        date=pick(raw.get('date')) or today_for_form(now),
        city=pick(raw.get('city')),
        club=pick(raw.get('club')),
        contacts=pick(raw.get('contacts')),
        coach=pick(raw.get('coach')),
        judge=pick(raw.get('judge')),
        judge_category=pick(raw.get('judgeCategory')),
        participants=normalize_participants(raw.get('participants')),
    )
