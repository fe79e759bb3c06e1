"""Storage contract implemented by every persistence backend."""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from recovery_api.domain.entities import (
    CommunityPost,
    CommunityReply,
    Credentials,
    Medication,
    MedicationLog,
    MedicationPatch,
    MoodLog,
    NewCommunityPost,
    NewCommunityReply,
    NewMedication,
    NewMedicationLog,
    NewMoodLog,
    NewProfessional,
    NewResource,
    NewUser,
    Professional,
    Resource,
    User,
    UserPatch,
)


class StorageError(Exception):
    """Base exception for storage operations."""


class NotFoundError(StorageError):
    """Raised when the requested id does not exist."""


class ConflictError(StorageError):
    """Raised when a uniqueness rule (username, email) would be violated."""


class Storage(ABC):
    """Persistence operations available to the request layer.

    Implementations return domain records and fail with ``NotFoundError`` or
    ``ConflictError``; they carry no transport concerns. Ids come from a single
    counter shared by all entity types, so an id is unique across the whole
    store, not only within its table.
    """

    # -------------------------- auth --------------------------
    @abstractmethod
    def register(self, new_user: NewUser) -> User: ...

    @abstractmethod
    def login(self, credentials: Credentials) -> Optional[User]:
        """Return the matching user, or None when the pair does not match."""

    # -------------------------- users --------------------------
    @abstractmethod
    def get_user(self, user_id: int) -> Optional[User]: ...

    @abstractmethod
    def get_user_by_username(self, username: str) -> Optional[User]: ...

    @abstractmethod
    def update_user(self, user_id: int, patch: UserPatch) -> User: ...

    # -------------------------- mood logs --------------------------
    @abstractmethod
    def create_mood_log(self, new_log: NewMoodLog) -> MoodLog: ...

    @abstractmethod
    def get_mood_logs_by_user(self, user_id: int, limit: int = 10) -> list[MoodLog]:
        """Most recent first, at most ``limit`` entries."""

    # -------------------------- medications --------------------------
    @abstractmethod
    def create_medication(self, new_medication: NewMedication) -> Medication: ...

    @abstractmethod
    def get_medication(self, medication_id: int) -> Optional[Medication]: ...

    @abstractmethod
    def get_medications_by_user(self, user_id: int) -> list[Medication]:
        """Active medications only, in insertion order."""

    @abstractmethod
    def update_medication(self, medication_id: int, patch: MedicationPatch) -> Medication: ...

    # -------------------------- medication logs --------------------------
    @abstractmethod
    def create_medication_log(self, new_log: NewMedicationLog) -> MedicationLog: ...

    @abstractmethod
    def get_medication_logs_by_user(self, user_id: int) -> list[MedicationLog]: ...

    # -------------------------- resources --------------------------
    @abstractmethod
    def get_all_resources(self) -> list[Resource]: ...

    @abstractmethod
    def get_resources_by_category(self, category: str) -> list[Resource]: ...

    @abstractmethod
    def create_resource(self, new_resource: NewResource) -> Resource: ...

    # -------------------------- community --------------------------
    @abstractmethod
    def get_all_community_posts(self) -> list[CommunityPost]:
        """Newest first."""

    @abstractmethod
    def create_community_post(self, new_post: NewCommunityPost) -> CommunityPost: ...

    @abstractmethod
    def get_replies_by_post(self, post_id: int) -> list[CommunityReply]:
        """Oldest first. An unknown post id yields an empty list."""

    @abstractmethod
    def create_community_reply(self, new_reply: NewCommunityReply) -> CommunityReply: ...

    # -------------------------- professionals --------------------------
    @abstractmethod
    def get_all_professionals(self) -> list[Professional]: ...

    @abstractmethod
    def create_professional(self, new_professional: NewProfessional) -> Professional: ...
