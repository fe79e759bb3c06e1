"""SQLAlchemy models for the relational backend."""
from __future__ import annotations

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Integer,
    String,
    Text,
    JSON,
    func,
)

from .session import Base


class IdCounter(Base):
    """Single-row table holding the next id shared by every entity table."""

    __tablename__ = "id_counter"

    name = Column(String(32), primary_key=True)
    next_id = Column(Integer, nullable=False, default=1)


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=False)
    username = Column(String(255), unique=True, nullable=False)
    password = Column(Text, nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    addiction_types = Column(JSON, default=list, nullable=False)
    recovery_start_date = Column(DateTime(timezone=True), nullable=True)
    emergency_contacts = Column(JSON, default=list, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class MoodLog(Base):
    __tablename__ = "mood_logs"

    id = Column(Integer, primary_key=True, autoincrement=False)
    user_id = Column(Integer, nullable=False, index=True)
    mood = Column(Integer, nullable=False)
    craving_level = Column(String(16), nullable=False)
    notes = Column(Text, nullable=True)
    timestamp = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class Medication(Base):
    __tablename__ = "medications"

    id = Column(Integer, primary_key=True, autoincrement=False)
    user_id = Column(Integer, nullable=False, index=True)
    name = Column(Text, nullable=False)
    dosage = Column(Text, nullable=False)
    frequency = Column(String(64), nullable=False)
    next_dose = Column(DateTime(timezone=True), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)


class MedicationLog(Base):
    __tablename__ = "medication_logs"

    id = Column(Integer, primary_key=True, autoincrement=False)
    medication_id = Column(Integer, nullable=False)
    user_id = Column(Integer, nullable=False, index=True)
    taken = Column(Boolean, nullable=False)
    timestamp = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class Resource(Base):
    __tablename__ = "resources"

    id = Column(Integer, primary_key=True, autoincrement=False)
    title = Column(Text, nullable=False)
    type = Column(String(16), nullable=False)
    content = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    duration = Column(String(64), nullable=True)
    category = Column(String(64), nullable=False, index=True)
    is_active = Column(Boolean, default=True, nullable=False)


class CommunityPost(Base):
    __tablename__ = "community_posts"

    id = Column(Integer, primary_key=True, autoincrement=False)
    user_id = Column(Integer, nullable=False)
    title = Column(Text, nullable=False)
    content = Column(Text, nullable=False)
    is_anonymous = Column(Boolean, default=True, nullable=False)
    timestamp = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class CommunityReply(Base):
    __tablename__ = "community_replies"

    id = Column(Integer, primary_key=True, autoincrement=False)
    # no foreign key: replies to unknown posts are accepted
    post_id = Column(Integer, nullable=False, index=True)
    user_id = Column(Integer, nullable=False)
    content = Column(Text, nullable=False)
    is_anonymous = Column(Boolean, default=True, nullable=False)
    timestamp = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class Professional(Base):
    __tablename__ = "professionals"

    id = Column(Integer, primary_key=True, autoincrement=False)
    name = Column(Text, nullable=False)
    type = Column(String(32), nullable=False)
    contact = Column(Text, nullable=False)
    availability = Column(Text, nullable=True)
    specialization = Column(Text, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
