"""
Smoke tests for SQLStorage against a temporary SQLite database.
"""
from __future__ import annotations

import sys
from contextlib import contextmanager
from pathlib import Path

import pytest

# Make the recovery_api package importable for local test runs
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from recovery_api.core import config as core_config  # noqa: E402
from recovery_api.db import create_tables  # noqa: E402
from recovery_api.db import models  # noqa: E402
from recovery_api.db import session as db_session  # noqa: E402
from recovery_api.domain.entities import (  # noqa: E402
    Credentials,
    CravingLevel,
    MedicationPatch,
    NewCommunityPost,
    NewCommunityReply,
    NewMedication,
    NewMedicationLog,
    NewMoodLog,
    NewUser,
    ResourceType,
    UserPatch,
)
from recovery_api.repositories.base import ConflictError, NotFoundError  # noqa: E402
from recovery_api.repositories import sql_repository  # noqa: E402
from recovery_api.repositories.sql_repository import SQLStorage  # noqa: E402
from tests.clock import FakeClock  # noqa: E402


@pytest.fixture()
def temp_db(tmp_path, monkeypatch):
    """Temporary SQLite database with a full teardown so the file is never left locked."""
    db_file = tmp_path / "test.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{db_file}")
    # clear caches so the env var is read again
    core_config.get_settings.cache_clear()
    db_session.get_engine.cache_clear()
    db_session._get_sessionmaker.cache_clear()  # type: ignore[attr-defined]

    engine = db_session.get_engine()
    models.Base.metadata.drop_all(bind=engine)
    models.Base.metadata.create_all(bind=engine)

    yield db_file

    models.Base.metadata.drop_all(bind=engine)
    engine.dispose()
    core_config.get_settings.cache_clear()
    db_session.get_engine.cache_clear()
    db_session._get_sessionmaker.cache_clear()  # type: ignore[attr-defined]


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def repo(temp_db, clock):
    storage = SQLStorage(clock=clock)
    storage.ensure_seeded()
    return storage


def test_seeding_runs_once_and_uses_shared_counter(repo):
    assert repo.ensure_seeded() is False
    assert repo.entity_count() == 6

    user = repo.get_user_by_username("demo_user")
    assert user.id == 1
    assert user.emergency_contacts == ["emergency-services", "support-buddy"]
    assert [r.id for r in repo.get_all_resources()] == [2, 3]
    assert [p.id for p in repo.get_all_professionals()] == [4, 5, 6]


def test_create_all_seeds_empty_database(temp_db):
    create_tables.create_all()
    create_tables.create_all()
    assert SQLStorage().entity_count() == 6


def test_demo_login(repo):
    assert repo.login(Credentials(username="demo_user", password="password123")).id == 1
    assert repo.login(Credentials(username="demo_user", password="nope")) is None


def test_ids_unique_across_tables(repo):
    mood = repo.create_mood_log(NewMoodLog(user_id=1, mood=4, craving_level=CravingLevel.MILD))
    med = repo.create_medication(NewMedication(user_id=1, name="Naltrexone", dosage="50mg", frequency="daily"))
    post = repo.create_community_post(NewCommunityPost(user_id=1, title="t", content="c"))
    assert [mood.id, med.id, post.id] == [7, 8, 9]


def test_register_conflict(repo):
    with pytest.raises(ConflictError):
        repo.register(
            NewUser(
                username="demo_user",
                password="whatever1",
                email="new@example.com",
                addiction_types=["alcohol"],
                recovery_start_date=None,
            )
        )
    user = repo.register(
        NewUser(
            username="sam",
            password="whatever1",
            email="sam@example.com",
            addiction_types=["gambling"],
            recovery_start_date=None,
        )
    )
    assert user.id == 7
    assert user.emergency_contacts == []


def test_ordering_matches_memory_store(repo, clock):
    a = repo.create_mood_log(NewMoodLog(user_id=1, mood=2, craving_level=CravingLevel.STRONG))
    clock.advance()
    b = repo.create_mood_log(NewMoodLog(user_id=1, mood=5, craving_level=CravingLevel.MILD, notes="ok"))
    clock.advance()
    c = repo.create_mood_log(NewMoodLog(user_id=1, mood=9, craving_level=CravingLevel.NONE))
    assert [log.id for log in repo.get_mood_logs_by_user(1, 2)] == [c.id, b.id]
    assert repo.get_mood_logs_by_user(1)[-1].id == a.id

    p1 = repo.create_community_post(NewCommunityPost(user_id=1, title="P1", content="x"))
    clock.advance()
    p2 = repo.create_community_post(NewCommunityPost(user_id=1, title="P2", content="y"))
    r1 = repo.create_community_reply(NewCommunityReply(post_id=p1.id, user_id=1, content="R1"))
    clock.advance()
    r2 = repo.create_community_reply(NewCommunityReply(post_id=p1.id, user_id=1, content="R2"))

    assert [p.id for p in repo.get_all_community_posts()] == [p2.id, p1.id]
    assert [r.id for r in repo.get_replies_by_post(p1.id)] == [r1.id, r2.id]
    assert repo.get_replies_by_post(9999) == []

    m1 = repo.create_medication_log(NewMedicationLog(medication_id=1, user_id=1, taken=True))
    clock.advance()
    m2 = repo.create_medication_log(NewMedicationLog(medication_id=1, user_id=1, taken=False))
    assert [log.id for log in repo.get_medication_logs_by_user(1)] == [m2.id, m1.id]


def test_medication_deactivation_and_missing_ids(repo):
    med = repo.create_medication(NewMedication(user_id=1, name="Disulfiram", dosage="250mg", frequency="daily"))
    assert [m.id for m in repo.get_medications_by_user(1)] == [med.id]

    repo.update_medication(med.id, MedicationPatch(is_active=False))
    assert repo.get_medications_by_user(1) == []
    assert repo.get_medication(med.id).name == "Disulfiram"

    count = repo.entity_count()
    with pytest.raises(NotFoundError):
        repo.update_medication(4242, MedicationPatch(name="x"))
    with pytest.raises(NotFoundError):
        repo.update_user(4242, UserPatch(emergency_contacts=[]))
    assert repo.entity_count() == count


def test_update_user_and_category_filter(repo):
    updated = repo.update_user(1, UserPatch(emergency_contacts=["sponsor"]))
    assert updated.emergency_contacts == ["sponsor"]
    assert repo.get_user(1).emergency_contacts == ["sponsor"]

    mindfulness = repo.get_resources_by_category("mindfulness")
    assert [r.title for r in mindfulness] == ["Mindfulness for Recovery"]
    assert mindfulness[0].type is ResourceType.VIDEO


def test_inactive_rows_are_left_out_of_listings(repo):
    with db_session.get_session() as session:
        session.add(
            models.Resource(
                id=100,
                title="Retired Guide",
                type="article",
                content="...",
                category="mindfulness",
                is_active=False,
            )
        )
        session.add(
            models.Professional(
                id=101,
                name="Dr. Gone",
                type="therapist",
                contact="phone:555-0000",
                is_active=False,
            )
        )
        session.commit()

    assert [r.id for r in repo.get_all_resources()] == [2, 3]
    assert [r.id for r in repo.get_resources_by_category("mindfulness")] == [3]
    assert [p.id for p in repo.get_all_professionals()] == [4, 5, 6]


def _new_user(username, email):
    return NewUser(
        username=username,
        password="whatever1",
        email=email,
        addiction_types=["alcohol"],
        recovery_start_date=None,
    )


def test_update_user_rejects_email_of_another_user(repo):
    other = repo.register(_new_user("sam", "sam@example.com"))
    with pytest.raises(ConflictError):
        repo.update_user(other.id, UserPatch(email="demo@example.com"))
    assert repo.update_user(1, UserPatch(email="demo@example.com")).email == "demo@example.com"


class _EmptyResult:
    def first(self):
        return None


class _StaleCheckSession:
    """Session whose SELECTs see no rows, as if another request took the email after the check ran."""

    def __init__(self, inner):
        self._inner = inner

    def execute(self, *args, **kwargs):
        return _EmptyResult()

    def __getattr__(self, name):
        return getattr(self._inner, name)


def test_update_user_email_taken_at_commit_is_a_conflict(repo, monkeypatch):
    other = repo.register(_new_user("sam", "sam@example.com"))

    @contextmanager
    def stale_session():
        with db_session.get_session() as session:
            yield _StaleCheckSession(session)

    monkeypatch.setattr(sql_repository, "get_session", stale_session)
    with pytest.raises(ConflictError):
        repo.update_user(other.id, UserPatch(email="demo@example.com", emergency_contacts=["sponsor"]))

    unchanged = repo.get_user(other.id)
    assert unchanged.email == "sam@example.com"
    assert unchanged.emergency_contacts == []
