from __future__ import annotations

import threading

import pytest

from techforge_client.session import Session, SessionStore


def test_store_starts_logged_out(store: SessionStore) -> None:
    session = store.current()

    assert session.user_id is None
    assert session.role is None
    assert session.user_profile is None
    assert store.is_logged_in is False


def test_login_then_logout_clears_every_field(store: SessionStore) -> None:
    store.login(Session(user_id="e1", role="EMPLOYEE", user_profile={"id": "e1"}))
    before = store.current()

    store.logout()
    after = store.current()

    assert before == Session(user_id="e1", role="EMPLOYEE", user_profile={"id": "e1"})
    assert after == Session()
    assert before.user_id == "e1"


def test_login_requires_identity(store: SessionStore) -> None:
    with pytest.raises(ValueError):
        store.login(Session(role="ADMIN"))


def test_login_copies_profile(store: SessionStore) -> None:
    profile = {"id": "e1", "fullName": "Ann"}
    store.login(Session(user_id="e1", role="EMPLOYEE", user_profile=profile))
    profile["fullName"] = "Changed"

    assert store.current().user_profile == {"id": "e1", "fullName": "Ann"}


def test_set_profile_derives_identity(store: SessionStore) -> None:
    session = store.set_profile({"id": "m7", "role": "MANAGER", "fullName": "Mia"})

    assert session.user_id == "m7"
    assert session.role == "MANAGER"
    assert session.user_profile == {"id": "m7", "role": "MANAGER", "fullName": "Mia"}
    assert store.current() is session


def test_set_profile_without_fields_leaves_them_unset(store: SessionStore) -> None:
    store.login(Session(user_id="e1", role="EMPLOYEE"))

    session = store.set_profile({"fullName": "Nameless"})

    assert session.user_id is None
    assert session.role is None
    assert session.user_profile == {"fullName": "Nameless"}


def test_set_profile_none_keeps_identity(store: SessionStore) -> None:
    store.login(Session(user_id="e1", role="EMPLOYEE", user_profile={"id": "e1"}))

    session = store.set_profile(None)

    assert session == Session(user_id="e1", role="EMPLOYEE")


def test_session_snapshot_is_frozen(store: SessionStore) -> None:
    session = store.login(Session(user_id="e1", role="EMPLOYEE"))

    with pytest.raises(Exception):
        session.user_id = "other"  # type: ignore[misc]


def test_concurrent_readers_never_see_mixed_identities(store: SessionStore) -> None:
    identities = [
        Session(user_id="a", role="ROLE_A", user_profile={"id": "a"}),
        Session(user_id="b", role="ROLE_B", user_profile={"id": "b"}),
    ]
    done = threading.Event()
    torn: list[Session] = []

    def writer() -> None:
        for index in range(2000):
            if index % 5 == 4:
                store.logout()
            else:
                store.login(identities[index % 2])
        done.set()

    def reader() -> None:
        while not done.is_set():
            session = store.current()
            if session.user_id is None:
                if session.role is not None or session.user_profile is not None:
                    torn.append(session)
                continue
            if session.role != f"ROLE_{session.user_id.upper()}" or session.user_profile != {"id": session.user_id}:
                torn.append(session)

    readers = [threading.Thread(target=reader) for _ in range(3)]
    for thread in readers:
        thread.start()
    writer()
    for thread in readers:
        thread.join(timeout=5)

    assert torn == []
