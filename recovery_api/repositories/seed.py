"""Demo data inserted when a store is first initialised."""
from __future__ import annotations

import logging
from datetime import datetime, timedelta

from recovery_api.domain.entities import (
    NewProfessional,
    NewResource,
    NewUser,
    ProfessionalType,
    ResourceType,
    UserPatch,
)
from recovery_api.repositories.base import Storage

logger = logging.getLogger(__name__)

DEMO_USERNAME = "demo_user"
DEMO_PASSWORD = "password123"
DEMO_EMAIL = "demo@example.com"
DEMO_ADDICTION_TYPES = ["alcohol", "opioids"]
DEMO_EMERGENCY_CONTACTS = ["emergency-services", "support-buddy"]
DEMO_RECOVERY_DAYS = 127


def demo_recovery_start(now: datetime) -> datetime:
    return now - timedelta(days=DEMO_RECOVERY_DAYS)


DEFAULT_RESOURCES = [
    NewResource(
        title="Understanding Triggers",
        type=ResourceType.ARTICLE,
        content="Learn to identify and manage your personal triggers for lasting recovery.",
        description="A comprehensive guide to identifying and managing triggers in addiction recovery.",
        duration="5 min read",
        category="triggers",
    ),
    NewResource(
        title="Mindfulness for Recovery",
        type=ResourceType.VIDEO,
        content="Guided meditation techniques specifically designed for addiction recovery.",
        description="Meditation and mindfulness practices for addiction recovery.",
        duration="12 min",
        category="mindfulness",
    ),
]

DEFAULT_PROFESSIONALS = [
    NewProfessional(
        name="Dr. Emily Chen",
        type=ProfessionalType.COUNSELOR,
        contact="phone:555-0123",
        availability="Available Today",
        specialization="Addiction Counselor",
    ),
    NewProfessional(
        name="Weekly Group Meeting",
        type=ProfessionalType.SUPPORT_GROUP,
        contact="location:Community Center",
        availability="Thursdays 7 PM",
        specialization="Group Support",
    ),
    NewProfessional(
        name="Crisis Hotline",
        type=ProfessionalType.HOTLINE,
        contact="phone:988",
        availability="24/7 Support",
        specialization="Crisis Intervention",
    ),
]


def seed_default_data(storage: Storage, now: datetime) -> None:
    """Insert the demo user and the fixed resource/professional catalog.

    Uses only Storage operations, so every record consumes an id from the
    store's shared counter in a fixed order: user, resources, professionals.
    """
    user = storage.register(
        NewUser(
            username=DEMO_USERNAME,
            password=DEMO_PASSWORD,
            email=DEMO_EMAIL,
            addiction_types=list(DEMO_ADDICTION_TYPES),
            recovery_start_date=demo_recovery_start(now),
        )
    )
    storage.update_user(user.id, UserPatch(emergency_contacts=list(DEMO_EMERGENCY_CONTACTS)))
    for resource in DEFAULT_RESOURCES:
        storage.create_resource(resource)
    for professional in DEFAULT_PROFESSIONALS:
        storage.create_professional(professional)
    logger.info(
        "Seeded demo data: user %s, %d resources, %d professionals",
        user.id,
        len(DEFAULT_RESOURCES),
        len(DEFAULT_PROFESSIONALS),
    )
