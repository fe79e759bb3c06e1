"""Request/response models for the REST API.

Incoming payloads are validated here before anything reaches the storage
layer; the ``to_*`` helpers turn them into the domain insert/patch shapes.
"""
from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from recovery_api.domain.entities import (
    Credentials,
    CravingLevel,
    MedicationPatch,
    NewCommunityPost,
    NewCommunityReply,
    NewMedication,
    NewMedicationLog,
    NewMoodLog,
    NewProfessional,
    NewResource,
    NewUser,
    ProfessionalType,
    ResourceType,
    UserPatch,
)


# -------------------------- auth / users --------------------------
class RegisterIn(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=8)
    email: EmailStr
    addiction_types: list[str] = Field(..., min_length=1, description="Please select at least one addiction type")
    recovery_start_date: datetime

    def to_domain(self) -> NewUser:
        return NewUser(
            username=self.username,
            password=self.password,
            email=str(self.email),
            addiction_types=list(self.addiction_types),
            recovery_start_date=self.recovery_start_date,
        )


class LoginIn(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

    def to_domain(self) -> Credentials:
        return Credentials(username=self.username, password=self.password)


class UserUpdateIn(BaseModel):
    email: Optional[EmailStr] = None
    addiction_types: Optional[list[str]] = None
    recovery_start_date: Optional[datetime] = None
    emergency_contacts: Optional[list[str]] = None

    def to_domain(self) -> UserPatch:
        data = self.model_dump(exclude_unset=True)
        if data.get("email") is not None:
            data["email"] = str(data["email"])
        return UserPatch(**data)


class UserOut(BaseModel):
    """Public view of a user: never carries the password hash."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str
    addiction_types: list[str]
    recovery_start_date: Optional[datetime] = None
    emergency_contacts: list[str]
    created_at: datetime


# -------------------------- mood logs --------------------------
class MoodLogIn(BaseModel):
    user_id: int
    mood: int = Field(..., ge=1, le=10)
    craving_level: CravingLevel
    notes: Optional[str] = None

    def to_domain(self) -> NewMoodLog:
        return NewMoodLog(
            user_id=self.user_id,
            mood=self.mood,
            craving_level=self.craving_level,
            notes=self.notes,
        )


# -------------------------- medications --------------------------
class MedicationIn(BaseModel):
    user_id: Optional[int] = None
    name: str = Field(..., min_length=1)
    dosage: str = Field(..., min_length=1)
    frequency: str = Field(..., min_length=1, description="daily, twice_daily, etc.")
    next_dose: Optional[datetime] = None

    def to_domain(self, user_id: int) -> NewMedication:
        return NewMedication(
            user_id=user_id,
            name=self.name,
            dosage=self.dosage,
            frequency=self.frequency,
            next_dose=self.next_dose,
        )


class MedicationUpdateIn(BaseModel):
    name: Optional[str] = None
    dosage: Optional[str] = None
    frequency: Optional[str] = None
    next_dose: Optional[datetime] = None
    is_active: Optional[bool] = None

    def to_domain(self) -> MedicationPatch:
        return MedicationPatch(**self.model_dump(exclude_unset=True))


class MedicationLogIn(BaseModel):
    medication_id: int
    user_id: Optional[int] = None
    taken: bool

    def to_domain(self, user_id: int) -> NewMedicationLog:
        return NewMedicationLog(medication_id=self.medication_id, user_id=user_id, taken=self.taken)


# -------------------------- resources / professionals --------------------------
class ResourceIn(BaseModel):
    title: str = Field(..., min_length=1)
    type: ResourceType
    content: str = Field(..., min_length=1)
    description: Optional[str] = None
    duration: Optional[str] = None
    category: str = Field(..., min_length=1)

    def to_domain(self) -> NewResource:
        return NewResource(**self.model_dump())


class ProfessionalIn(BaseModel):
    name: str = Field(..., min_length=1)
    type: ProfessionalType
    contact: str = Field(..., min_length=1)
    availability: Optional[str] = None
    specialization: Optional[str] = None

    def to_domain(self) -> NewProfessional:
        return NewProfessional(**self.model_dump())


# -------------------------- community --------------------------
class CommunityPostIn(BaseModel):
    user_id: Optional[int] = None
    title: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)
    is_anonymous: bool = True

    def to_domain(self, user_id: int) -> NewCommunityPost:
        return NewCommunityPost(
            user_id=user_id,
            title=self.title,
            content=self.content,
            is_anonymous=self.is_anonymous,
        )


class CommunityReplyIn(BaseModel):
    user_id: Optional[int] = None
    content: str = Field(..., min_length=1)
    is_anonymous: bool = True

    def to_domain(self, post_id: int, user_id: int) -> NewCommunityReply:
        return NewCommunityReply(
            post_id=post_id,
            user_id=user_id,
            content=self.content,
            is_anonymous=self.is_anonymous,
        )
