"""
In-process reference implementation of the Storage contract.

Every entity type lives in its own dict keyed by id; all of them draw ids from
one counter owned by the instance. Nothing is ever removed from the dicts.
Routes run in FastAPI's threadpool, so each operation takes the instance lock
for its whole read-check-write; that keeps operations atomic with respect to
each other and the id counter exclusive.
"""
from __future__ import annotations

import copy
import logging
import threading
from datetime import datetime, timezone
from typing import Callable, Optional, TypeVar

from recovery_api.core.security import hash_password, verify_password
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
from recovery_api.repositories.base import ConflictError, NotFoundError, Storage
from recovery_api.repositories.seed import seed_default_data

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _newest_first(items: list) -> list:
    # equal timestamps fall back to id, which follows creation order
    return sorted(items, key=lambda item: (item.timestamp, item.id), reverse=True)


def _oldest_first(items: list) -> list:
    return sorted(items, key=lambda item: (item.timestamp, item.id))


class MemoryStorage(Storage):
    """Map-backed store seeded with demo data at construction."""

    def __init__(self, clock: Callable[[], datetime] | None = None, *, seed: bool = True) -> None:
        self._clock = clock or _utcnow
        self._lock = threading.Lock()
        self._users: dict[int, User] = {}
        self._mood_logs: dict[int, MoodLog] = {}
        self._medications: dict[int, Medication] = {}
        self._medication_logs: dict[int, MedicationLog] = {}
        self._resources: dict[int, Resource] = {}
        self._community_posts: dict[int, CommunityPost] = {}
        self._community_replies: dict[int, CommunityReply] = {}
        self._professionals: dict[int, Professional] = {}
        self._next_id = 1
        if seed:
            seed_default_data(self, self._now())

    # -------------------------------------- helpers --------------------------------------
    def _now(self) -> datetime:
        return self._clock()

    def _allocate_id(self) -> int:
        # caller holds self._lock
        allocated = self._next_id
        self._next_id += 1
        return allocated

    def _add(self, mapping: dict, build: Callable[[int], T]) -> T:
        """Allocate an id, build the record with it and store it in one step."""
        with self._lock:
            entity = build(self._allocate_id())
            mapping[entity.id] = entity
            return self._copy(entity)

    def _snapshot(self, mapping: dict) -> list:
        with self._lock:
            return list(mapping.values())

    @staticmethod
    def _copy(entity: T) -> T:
        return copy.deepcopy(entity)

    def _copies(self, entities) -> list:
        return [self._copy(entity) for entity in entities]

    def entity_count(self) -> int:
        """Total number of records across every entity type."""
        with self._lock:
            return sum(
                len(mapping)
                for mapping in (
                    self._users,
                    self._mood_logs,
                    self._medications,
                    self._medication_logs,
                    self._resources,
                    self._community_posts,
                    self._community_replies,
                    self._professionals,
                )
            )

    # -------------------------- auth --------------------------
    def register(self, new_user: NewUser) -> User:
        with self._lock:
            existing = next(
                (
                    u
                    for u in self._users.values()
                    if u.username == new_user.username or u.email == new_user.email
                ),
                None,
            )
            if existing:
                logger.info("Registration rejected for %s: username or email taken", new_user.username)
                raise ConflictError("User already exists")

            user = User(
                id=self._allocate_id(),
                username=new_user.username,
                password=hash_password(new_user.password),
                email=new_user.email,
                addiction_types=list(new_user.addiction_types or []),
                recovery_start_date=new_user.recovery_start_date,
                emergency_contacts=[],
                created_at=self._now(),
            )
            self._users[user.id] = user
        logger.info("Registered user %s (id=%s)", user.username, user.id)
        return self._copy(user)

    def login(self, credentials: Credentials) -> Optional[User]:
        for user in self._snapshot(self._users):
            if user.username == credentials.username and verify_password(credentials.password, user.password):
                return self._copy(user)
        logger.info("Login failed for %s", credentials.username)
        return None

    # -------------------------- users --------------------------
    def get_user(self, user_id: int) -> Optional[User]:
        with self._lock:
            user = self._users.get(user_id)
        return self._copy(user) if user else None

    def get_user_by_username(self, username: str) -> Optional[User]:
        for user in self._snapshot(self._users):
            if user.username == username:
                return self._copy(user)
        return None

    def update_user(self, user_id: int, patch: UserPatch) -> User:
        changes = patch.changes()
        new_email = changes.get("email")
        with self._lock:
            user = self._users.get(user_id)
            if not user:
                raise NotFoundError("User not found")
            if new_email and any(u.email == new_email and u.id != user_id for u in self._users.values()):
                raise ConflictError("Email already in use")
            updated = _replace(user, changes)
            self._users[user_id] = updated
        return self._copy(updated)

    # -------------------------- mood logs --------------------------
    def create_mood_log(self, new_log: NewMoodLog) -> MoodLog:
        mood_log = self._add(
            self._mood_logs,
            lambda new_id: MoodLog(
                id=new_id,
                user_id=new_log.user_id,
                mood=new_log.mood,
                craving_level=new_log.craving_level,
                notes=new_log.notes or None,
                timestamp=self._now(),
            ),
        )
        logger.debug("Created mood log %s for user %s", mood_log.id, mood_log.user_id)
        return mood_log

    def get_mood_logs_by_user(self, user_id: int, limit: int = 10) -> list[MoodLog]:
        logs = [log for log in self._snapshot(self._mood_logs) if log.user_id == user_id]
        return self._copies(_newest_first(logs)[: max(limit, 0)])

    # -------------------------- medications --------------------------
    def create_medication(self, new_medication: NewMedication) -> Medication:
        medication = self._add(
            self._medications,
            lambda new_id: Medication(
                id=new_id,
                user_id=new_medication.user_id,
                name=new_medication.name,
                dosage=new_medication.dosage,
                frequency=new_medication.frequency,
                next_dose=new_medication.next_dose,
                is_active=True,
            ),
        )
        logger.debug("Created medication %s for user %s", medication.id, medication.user_id)
        return medication

    def get_medication(self, medication_id: int) -> Optional[Medication]:
        with self._lock:
            medication = self._medications.get(medication_id)
        return self._copy(medication) if medication else None

    def get_medications_by_user(self, user_id: int) -> list[Medication]:
        return self._copies(
            med for med in self._snapshot(self._medications) if med.user_id == user_id and med.is_active
        )

    def update_medication(self, medication_id: int, patch: MedicationPatch) -> Medication:
        with self._lock:
            medication = self._medications.get(medication_id)
            if not medication:
                raise NotFoundError("Medication not found")
            updated = _replace(medication, patch.changes())
            self._medications[medication_id] = updated
        return self._copy(updated)

    # -------------------------- medication logs --------------------------
    def create_medication_log(self, new_log: NewMedicationLog) -> MedicationLog:
        medication_log = self._add(
            self._medication_logs,
            lambda new_id: MedicationLog(
                id=new_id,
                medication_id=new_log.medication_id,
                user_id=new_log.user_id,
                taken=new_log.taken,
                timestamp=self._now(),
            ),
        )
        logger.debug("Created medication log %s for medication %s", medication_log.id, medication_log.medication_id)
        return medication_log

    def get_medication_logs_by_user(self, user_id: int) -> list[MedicationLog]:
        logs = [log for log in self._snapshot(self._medication_logs) if log.user_id == user_id]
        return self._copies(_newest_first(logs))

    # -------------------------- resources --------------------------
    def get_all_resources(self) -> list[Resource]:
        return self._copies(r for r in self._snapshot(self._resources) if r.is_active)

    def get_resources_by_category(self, category: str) -> list[Resource]:
        return self._copies(
            r for r in self._snapshot(self._resources) if r.category == category and r.is_active
        )

    def create_resource(self, new_resource: NewResource) -> Resource:
        return self._add(
            self._resources,
            lambda new_id: Resource(
                id=new_id,
                title=new_resource.title,
                type=new_resource.type,
                content=new_resource.content,
                description=new_resource.description,
                duration=new_resource.duration,
                category=new_resource.category,
                is_active=True,
            ),
        )

    # -------------------------- community --------------------------
    def get_all_community_posts(self) -> list[CommunityPost]:
        return self._copies(_newest_first(self._snapshot(self._community_posts)))

    def create_community_post(self, new_post: NewCommunityPost) -> CommunityPost:
        post = self._add(
            self._community_posts,
            lambda new_id: CommunityPost(
                id=new_id,
                user_id=new_post.user_id,
                title=new_post.title,
                content=new_post.content,
                is_anonymous=new_post.is_anonymous,
                timestamp=self._now(),
            ),
        )
        logger.debug("Created community post %s", post.id)
        return post

    def get_replies_by_post(self, post_id: int) -> list[CommunityReply]:
        replies = [reply for reply in self._snapshot(self._community_replies) if reply.post_id == post_id]
        return self._copies(_oldest_first(replies))

    def create_community_reply(self, new_reply: NewCommunityReply) -> CommunityReply:
        reply = self._add(
            self._community_replies,
            lambda new_id: CommunityReply(
                id=new_id,
                post_id=new_reply.post_id,
                user_id=new_reply.user_id,
                content=new_reply.content,
                is_anonymous=new_reply.is_anonymous,
                timestamp=self._now(),
            ),
        )
        logger.debug("Created reply %s on post %s", reply.id, reply.post_id)
        return reply

    # -------------------------- professionals --------------------------
    def get_all_professionals(self) -> list[Professional]:
        return self._copies(p for p in self._snapshot(self._professionals) if p.is_active)

    def create_professional(self, new_professional: NewProfessional) -> Professional:
        return self._add(
            self._professionals,
            lambda new_id: Professional(
                id=new_id,
                name=new_professional.name,
                type=new_professional.type,
                contact=new_professional.contact,
                availability=new_professional.availability,
                specialization=new_professional.specialization,
                is_active=True,
            ),
        )


def _replace(entity: T, changes: dict) -> T:
    """Shallow merge of ``changes`` over a dataclass record."""
    merged = copy.deepcopy(entity)
    for name, value in changes.items():
        setattr(merged, name, copy.deepcopy(value))
    return merged
