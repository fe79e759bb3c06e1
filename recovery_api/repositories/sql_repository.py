"""Storage contract backed by SQLAlchemy."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError

from recovery_api.core.security import hash_password, verify_password
from recovery_api.db import models
from recovery_api.db.session import get_session
from recovery_api.domain import entities
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
from recovery_api.repositories.base import ConflictError, NotFoundError, Storage
from recovery_api.repositories.seed import seed_default_data

logger = logging.getLogger(__name__)

COUNTER_NAME = "global"


def _aware(value: datetime | None) -> datetime | None:
    # SQLite drops tzinfo on the way back; stored values are always UTC.
    if value is None:
        return None
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


# -------------------------- row -> domain --------------------------
def _to_user(row: models.User) -> entities.User:
    return entities.User(
        id=row.id,
        username=row.username,
        password=row.password,
        email=row.email,
        addiction_types=list(row.addiction_types or []),
        recovery_start_date=_aware(row.recovery_start_date),
        emergency_contacts=list(row.emergency_contacts or []),
        created_at=_aware(row.created_at),
    )


def _to_mood_log(row: models.MoodLog) -> entities.MoodLog:
    return entities.MoodLog(
        id=row.id,
        user_id=row.user_id,
        mood=row.mood,
        craving_level=CravingLevel(row.craving_level),
        notes=row.notes,
        timestamp=_aware(row.timestamp),
    )


def _to_medication(row: models.Medication) -> entities.Medication:
    return entities.Medication(
        id=row.id,
        user_id=row.user_id,
        name=row.name,
        dosage=row.dosage,
        frequency=row.frequency,
        next_dose=_aware(row.next_dose),
        is_active=bool(row.is_active),
    )


def _to_medication_log(row: models.MedicationLog) -> entities.MedicationLog:
    return entities.MedicationLog(
        id=row.id,
        medication_id=row.medication_id,
        user_id=row.user_id,
        taken=bool(row.taken),
        timestamp=_aware(row.timestamp),
    )


def _to_resource(row: models.Resource) -> entities.Resource:
    return entities.Resource(
        id=row.id,
        title=row.title,
        type=ResourceType(row.type),
        content=row.content,
        description=row.description,
        duration=row.duration,
        category=row.category,
        is_active=bool(row.is_active),
    )


def _to_post(row: models.CommunityPost) -> entities.CommunityPost:
    return entities.CommunityPost(
        id=row.id,
        user_id=row.user_id,
        title=row.title,
        content=row.content,
        is_anonymous=bool(row.is_anonymous),
        timestamp=_aware(row.timestamp),
    )


def _to_reply(row: models.CommunityReply) -> entities.CommunityReply:
    return entities.CommunityReply(
        id=row.id,
        post_id=row.post_id,
        user_id=row.user_id,
        content=row.content,
        is_anonymous=bool(row.is_anonymous),
        timestamp=_aware(row.timestamp),
    )


def _to_professional(row: models.Professional) -> entities.Professional:
    return entities.Professional(
        id=row.id,
        name=row.name,
        type=ProfessionalType(row.type),
        contact=row.contact,
        availability=row.availability,
        specialization=row.specialization,
        is_active=bool(row.is_active),
    )


def _value(enum_or_str) -> str:
    return getattr(enum_or_str, "value", enum_or_str)


class SQLStorage(Storage):
    """CRUD helpers wrapping the SQLAlchemy session.

    Every create reads and bumps the ``id_counter`` row in the same transaction
    as the insert, so ids stay unique across all tables.
    """

    def __init__(self, clock: Callable[[], datetime] | None = None) -> None:
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    # -------------------------------------- helpers --------------------------------------
    def _now(self) -> datetime:
        return self._clock()

    def _allocate_id(self, session) -> int:
        counter = session.get(models.IdCounter, COUNTER_NAME, with_for_update=True)
        if counter is None:
            counter = models.IdCounter(name=COUNTER_NAME, next_id=1)
            session.add(counter)
        allocated = int(counter.next_id or 1)
        counter.next_id = allocated + 1
        return allocated

    def _insert(self, row):
        with get_session() as session:
            row.id = self._allocate_id(session)
            session.add(row)
            session.commit()
            return row

    def ensure_seeded(self) -> bool:
        """Seed the demo data when the users table is empty. Returns True if it seeded."""
        with get_session() as session:
            users = session.execute(select(func.count()).select_from(models.User)).scalar_one()
        if users:
            return False
        seed_default_data(self, self._now())
        return True

    def entity_count(self) -> int:
        tables = (
            models.User,
            models.MoodLog,
            models.Medication,
            models.MedicationLog,
            models.Resource,
            models.CommunityPost,
            models.CommunityReply,
            models.Professional,
        )
        with get_session() as session:
            return sum(
                session.execute(select(func.count()).select_from(table)).scalar_one() for table in tables
            )

    # -------------------------- auth --------------------------
    def register(self, new_user: NewUser) -> entities.User:
        with get_session() as session:
            stmt = select(models.User.id).where(
                or_(models.User.username == new_user.username, models.User.email == new_user.email)
            )
            if session.execute(stmt).first() is not None:
                logger.info("Registration rejected for %s: username or email taken", new_user.username)
                raise ConflictError("User already exists")
            row = models.User(
                id=self._allocate_id(session),
                username=new_user.username,
                password=hash_password(new_user.password),
                email=new_user.email,
                addiction_types=list(new_user.addiction_types or []),
                recovery_start_date=new_user.recovery_start_date,
                emergency_contacts=[],
                created_at=self._now(),
            )
            session.add(row)
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                raise ConflictError("User already exists") from exc
            logger.info("Registered user %s (id=%s)", row.username, row.id)
            return _to_user(row)

    def login(self, credentials: Credentials) -> Optional[entities.User]:
        with get_session() as session:
            stmt = select(models.User).where(models.User.username == credentials.username)
            row = session.execute(stmt).scalar_one_or_none()
            if row and verify_password(credentials.password, row.password):
                return _to_user(row)
        logger.info("Login failed for %s", credentials.username)
        return None

    # -------------------------- users --------------------------
    def get_user(self, user_id: int) -> Optional[entities.User]:
        with get_session() as session:
            row = session.get(models.User, user_id)
            return _to_user(row) if row else None

    def get_user_by_username(self, username: str) -> Optional[entities.User]:
        with get_session() as session:
            stmt = select(models.User).where(models.User.username == username)
            row = session.execute(stmt).scalar_one_or_none()
            return _to_user(row) if row else None

    def update_user(self, user_id: int, patch: UserPatch) -> entities.User:
        changes = patch.changes()
        with get_session() as session:
            row = session.get(models.User, user_id)
            if not row:
                raise NotFoundError("User not found")
            new_email = changes.get("email")
            if new_email:
                stmt = select(models.User.id).where(models.User.email == new_email, models.User.id != user_id)
                if session.execute(stmt).first() is not None:
                    raise ConflictError("Email already in use")
            for name, value in changes.items():
                setattr(row, name, list(value) if isinstance(value, list) else value)
            try:
                session.commit()
            except IntegrityError as exc:
                session.rollback()
                raise ConflictError("Email already in use") from exc
            return _to_user(row)

    # -------------------------- mood logs --------------------------
    def create_mood_log(self, new_log: NewMoodLog) -> entities.MoodLog:
        row = self._insert(
            models.MoodLog(
                user_id=new_log.user_id,
                mood=new_log.mood,
                craving_level=_value(new_log.craving_level),
                notes=new_log.notes or None,
                timestamp=self._now(),
            )
        )
        logger.debug("Created mood log %s for user %s", row.id, row.user_id)
        return _to_mood_log(row)

    def get_mood_logs_by_user(self, user_id: int, limit: int = 10) -> list[entities.MoodLog]:
        with get_session() as session:
            stmt = (
                select(models.MoodLog)
                .where(models.MoodLog.user_id == user_id)
                .order_by(models.MoodLog.timestamp.desc(), models.MoodLog.id.desc())
                .limit(max(limit, 0))
            )
            return [_to_mood_log(row) for row in session.execute(stmt).scalars().all()]

    # -------------------------- medications --------------------------
    def create_medication(self, new_medication: NewMedication) -> entities.Medication:
        row = self._insert(
            models.Medication(
                user_id=new_medication.user_id,
                name=new_medication.name,
                dosage=new_medication.dosage,
                frequency=new_medication.frequency,
                next_dose=new_medication.next_dose,
                is_active=True,
            )
        )
        logger.debug("Created medication %s for user %s", row.id, row.user_id)
        return _to_medication(row)

    def get_medication(self, medication_id: int) -> Optional[entities.Medication]:
        with get_session() as session:
            row = session.get(models.Medication, medication_id)
            return _to_medication(row) if row else None

    def get_medications_by_user(self, user_id: int) -> list[entities.Medication]:
        with get_session() as session:
            stmt = (
                select(models.Medication)
                .where(models.Medication.user_id == user_id, models.Medication.is_active.is_(True))
                .order_by(models.Medication.id)
            )
            return [_to_medication(row) for row in session.execute(stmt).scalars().all()]

    def update_medication(self, medication_id: int, patch: MedicationPatch) -> entities.Medication:
        with get_session() as session:
            row = session.get(models.Medication, medication_id)
            if not row:
                raise NotFoundError("Medication not found")
            for name, value in patch.changes().items():
                setattr(row, name, value)
            session.commit()
            return _to_medication(row)

    # -------------------------- medication logs --------------------------
    def create_medication_log(self, new_log: NewMedicationLog) -> entities.MedicationLog:
        row = self._insert(
            models.MedicationLog(
                medication_id=new_log.medication_id,
                user_id=new_log.user_id,
                taken=new_log.taken,
                timestamp=self._now(),
            )
        )
        return _to_medication_log(row)

    def get_medication_logs_by_user(self, user_id: int) -> list[entities.MedicationLog]:
        with get_session() as session:
            stmt = (
                select(models.MedicationLog)
                .where(models.MedicationLog.user_id == user_id)
                .order_by(models.MedicationLog.timestamp.desc(), models.MedicationLog.id.desc())
            )
            return [_to_medication_log(row) for row in session.execute(stmt).scalars().all()]

    # -------------------------- resources --------------------------
    def get_all_resources(self) -> list[entities.Resource]:
        with get_session() as session:
            stmt = select(models.Resource).where(models.Resource.is_active.is_(True)).order_by(models.Resource.id)
            return [_to_resource(row) for row in session.execute(stmt).scalars().all()]

    def get_resources_by_category(self, category: str) -> list[entities.Resource]:
        with get_session() as session:
            stmt = (
                select(models.Resource)
                .where(models.Resource.category == category, models.Resource.is_active.is_(True))
                .order_by(models.Resource.id)
            )
            return [_to_resource(row) for row in session.execute(stmt).scalars().all()]

    def create_resource(self, new_resource: NewResource) -> entities.Resource:
        row = self._insert(
            models.Resource(
                title=new_resource.title,
                type=_value(new_resource.type),
                content=new_resource.content,
                description=new_resource.description,
                duration=new_resource.duration,
                category=new_resource.category,
                is_active=True,
            )
        )
        return _to_resource(row)

    # -------------------------- community --------------------------
    def get_all_community_posts(self) -> list[entities.CommunityPost]:
        with get_session() as session:
            stmt = select(models.CommunityPost).order_by(
                models.CommunityPost.timestamp.desc(), models.CommunityPost.id.desc()
            )
            return [_to_post(row) for row in session.execute(stmt).scalars().all()]

    def create_community_post(self, new_post: NewCommunityPost) -> entities.CommunityPost:
        row = self._insert(
            models.CommunityPost(
                user_id=new_post.user_id,
                title=new_post.title,
                content=new_post.content,
                is_anonymous=new_post.is_anonymous,
                timestamp=self._now(),
            )
        )
        logger.debug("Created community post %s", row.id)
        return _to_post(row)

    def get_replies_by_post(self, post_id: int) -> list[entities.CommunityReply]:
        with get_session() as session:
            stmt = (
                select(models.CommunityReply)
                .where(models.CommunityReply.post_id == post_id)
                .order_by(models.CommunityReply.timestamp.asc(), models.CommunityReply.id.asc())
            )
            return [_to_reply(row) for row in session.execute(stmt).scalars().all()]

    def create_community_reply(self, new_reply: NewCommunityReply) -> entities.CommunityReply:
        row = self._insert(
            models.CommunityReply(
                post_id=new_reply.post_id,
                user_id=new_reply.user_id,
                content=new_reply.content,
                is_anonymous=new_reply.is_anonymous,
                timestamp=self._now(),
            )
        )
        logger.debug("Created reply %s on post %s", row.id, row.post_id)
        return _to_reply(row)

    # -------------------------- professionals --------------------------
    def get_all_professionals(self) -> list[entities.Professional]:
        with get_session() as session:
            stmt = (
                select(models.Professional)
                .where(models.Professional.is_active.is_(True))
                .order_by(models.Professional.id)
            )
            return [_to_professional(row) for row in session.execute(stmt).scalars().all()]

    def create_professional(self, new_professional: NewProfessional) -> entities.Professional:
        row = self._insert(
            models.Professional(
                name=new_professional.name,
                type=_value(new_professional.type),
                contact=new_professional.contact,
                availability=new_professional.availability,
                specialization=new_professional.specialization,
                is_active=True,
            )
        )
        return _to_professional(row)
