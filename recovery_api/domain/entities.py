"""Domain records shared by every storage backend.

Stored entities carry an id assigned by the store; the ``New*`` shapes hold
only caller-supplied fields. ``*Patch`` shapes enumerate what an update may
change: a field left as ``None`` is not applied.
"""
from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import datetime
from enum import Enum
from typing import Any, Optional


class CravingLevel(str, Enum):
    NONE = "none"
    MILD = "mild"
    MODERATE = "moderate"
    STRONG = "strong"


class ResourceType(str, Enum):
    ARTICLE = "article"
    VIDEO = "video"
    AUDIO = "audio"


class ProfessionalType(str, Enum):
    COUNSELOR = "counselor"
    THERAPIST = "therapist"
    SUPPORT_GROUP = "support_group"
    HOTLINE = "hotline"


# -------------------------- stored entities --------------------------
@dataclass
class User:
    id: int
    username: str
    password: str
    email: str
    addiction_types: list[str]
    recovery_start_date: Optional[datetime]
    emergency_contacts: list[str]
    created_at: datetime


@dataclass
class MoodLog:
    id: int
    user_id: int
    mood: int
    craving_level: CravingLevel
    notes: Optional[str]
    timestamp: datetime


@dataclass
class Medication:
    id: int
    user_id: int
    name: str
    dosage: str
    frequency: str
    next_dose: Optional[datetime]
    is_active: bool = True


@dataclass
class MedicationLog:
    id: int
    medication_id: int
    user_id: int
    taken: bool
    timestamp: datetime


@dataclass
class Resource:
    id: int
    title: str
    type: ResourceType
    content: str
    description: Optional[str]
    duration: Optional[str]
    category: str
    is_active: bool = True


@dataclass
class CommunityPost:
    id: int
    user_id: int
    title: str
    content: str
    is_anonymous: bool
    timestamp: datetime


@dataclass
class CommunityReply:
    id: int
    post_id: int
    user_id: int
    content: str
    is_anonymous: bool
    timestamp: datetime


@dataclass
class Professional:
    id: int
    name: str
    type: ProfessionalType
    contact: str
    availability: Optional[str]
    specialization: Optional[str]
    is_active: bool = True


# -------------------------- insert shapes --------------------------
@dataclass
class NewUser:
    username: str
    password: str
    email: str
    addiction_types: list[str]
    recovery_start_date: Optional[datetime]


@dataclass
class Credentials:
    username: str
    password: str


@dataclass
class NewMoodLog:
    user_id: int
    mood: int
    craving_level: CravingLevel
    notes: Optional[str] = None


@dataclass
class NewMedication:
    user_id: int
    name: str
    dosage: str
    frequency: str
    next_dose: Optional[datetime] = None


@dataclass
class NewMedicationLog:
    medication_id: int
    user_id: int
    taken: bool


@dataclass
class NewResource:
    title: str
    type: ResourceType
    content: str
    category: str
    description: Optional[str] = None
    duration: Optional[str] = None


@dataclass
class NewCommunityPost:
    user_id: int
    title: str
    content: str
    is_anonymous: bool = True


@dataclass
class NewCommunityReply:
    post_id: int
    user_id: int
    content: str
    is_anonymous: bool = True


@dataclass
class NewProfessional:
    name: str
    type: ProfessionalType
    contact: str
    availability: Optional[str] = None
    specialization: Optional[str] = None


# -------------------------- patches --------------------------
@dataclass
class _Patch:
    def changes(self) -> dict[str, Any]:
        """Fields explicitly supplied (non-None) by the caller."""
        return {f.name: getattr(self, f.name) for f in fields(self) if getattr(self, f.name) is not None}


@dataclass
class UserPatch(_Patch):
    email: Optional[str] = None
    addiction_types: Optional[list[str]] = None
    recovery_start_date: Optional[datetime] = None
    emergency_contacts: Optional[list[str]] = None


@dataclass
class MedicationPatch(_Patch):
    name: Optional[str] = None
    dosage: Optional[str] = None
    frequency: Optional[str] = None
    next_dose: Optional[datetime] = None
    is_active: Optional[bool] = None
