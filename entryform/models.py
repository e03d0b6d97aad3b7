# Standard library imports
from dataclasses import dataclass, field
from typing import Any, Dict, Tuple


@dataclass(frozen=True)
class Participant:
    """One gymnast on the entry roster. ``idx`` is the 1-based position in the roster."""
    idx: int
    name: str = ''
    birth_year: str = ''
    has_rank: str = ''
    performing_rank: str = ''
    medical_visa: str = ''

    def to_dict(self) -> Dict[str, Any]:
        return {
            'idx': self.idx,
            'name': self.name,
            'birthYear': self.birth_year,
            'hasRank': self.has_rank,
            'performingRank': self.performing_rank,
            'medicalVisa': self.medical_visa,
        }


@dataclass(frozen=True)
class Submission:
    """
    A normalized entry form.

    Built fresh for every request from the posted payload and consumed by the
    roster log, the document renderer and the mailer. It is never stored as an
    object; only the rows, the document and the email derived from it are.
    """
    date: str
    city: str = ''
    club: str = ''
    contacts: str = ''
    coach: str = ''
    judge: str = ''
    judge_category: str = ''
    participants: Tuple[Participant, ...] = field(default_factory=tuple)

    @property
    def judge_line(self) -> str:
        """Judge name and category joined by a comma, empty parts dropped."""
        return ', '.join(part for part in (self.judge, self.judge_category) if part)

    @property
    def participant_count(self) -> int:
        return len(self.participants)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'date': self.date,
            'city': self.city,
            'club': self.club,
            'contacts': self.contacts,
            'coach': self.coach,
            'judge': self.judge,
            'judgeCategory': self.judge_category,
            'participants': [p.to_dict() for p in self.participants],
        }
