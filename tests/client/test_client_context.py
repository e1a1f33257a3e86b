from __future__ import annotations

import asyncio

import pytest

from school_journal.client.context import build_client
from school_journal.client.pagination import paginate
from school_journal.client.storage import StoredUser
from school_journal.client.sync import SyncState
from school_journal.core.enums import Role, Theme

USERS_READ = ("GET", "/api/users")


def test_paginate_slices_and_clamps():
    items = list(range(25))

    last = paginate(items, 3)
    assert last.items == [20, 21, 22, 23, 24]
    assert (last.current_page, last.total_pages) == (3, 3)
    assert last.has_previous and not last.has_next

    assert paginate(items, 0).current_page == 1
    assert paginate(items, 99).current_page == 3
    empty = paginate([], 1)
    assert (empty.items, empty.total_pages) == ([], 1)
    with pytest.raises(ValueError):
        paginate(items, 1, per_page=0)


def test_start_restores_session_and_polls_until_shutdown(gateway, tmp_path):
    async def main():
        client = build_client(gateway=gateway, data_dir=tmp_path)
        client.session_store.save(StoredUser("u3", "Andi Pratama", Role.STUDENT))
        state = await client.start()
        reads = gateway.calls.count(USERS_READ)
        await asyncio.sleep(0.3)
        polled = gateway.calls.count(USERS_READ) - reads
        await client.shutdown()
        after = gateway.calls.count(USERS_READ)
        await asyncio.sleep(0.15)
        return client, state, polled, gateway.calls.count(USERS_READ) - after

    client, state, polled, after_shutdown = asyncio.run(main())

    assert state == SyncState.READY
    assert polled >= 1
    assert after_shutdown == 0
    assert gateway.closed
    assert not client.started


def test_start_twice_is_an_error(gateway, tmp_path):
    async def main():
        client = build_client(gateway=gateway, data_dir=tmp_path)
        await client.start()
        try:
            with pytest.raises(RuntimeError):
                await client.start()
        finally:
            await client.shutdown()

    asyncio.run(main())


def test_visibility_return_triggers_refresh(gateway, tmp_path):
    async def main():
        async with build_client(gateway=gateway, data_dir=tmp_path) as client:
            await client.controller.login("STUDENT", "123456", "abc123")
            hidden = client.on_visibility_change(False)
            task = client.on_visibility_change(True)
            return hidden, await task

    hidden, refreshed = asyncio.run(main())

    assert hidden is None
    assert refreshed is True


def test_dashboard_follows_session(gateway, tmp_path):
    async def main():
        async with build_client(gateway=gateway, data_dir=tmp_path) as client:
            before = client.dashboard()
            await client.controller.login("PARENT", "6471010101800001", "ortu123")
            return before, client.dashboard()

    before, view = asyncio.run(main())

    assert before is None
    assert view.name == "parent"
    assert [s["id"] for s in view.data["students"]] == ["u3"]


def test_journal_page_pages_the_dashboard_journals(gateway, tmp_path):
    async def main():
        async with build_client(gateway=gateway, data_dir=tmp_path) as client:
            await client.controller.login("STUDENT", "123456", "abc123")
            for day in range(1, 13):
                await gateway.create_journal(
                    {"studentId": "u3", "date": f"2024-02-{day:02d}", "category": "Belajar", "content": f"hari {day}"}
                )
            await gateway.create_journal(
                {"studentId": "u4", "date": "2024-02-01", "category": "Belajar", "content": "bukan milik Andi"}
            )
            await client.controller.refresh(force=True)
            return client.journal_page(1), client.journal_page(7)

    first, last = asyncio.run(main())

    assert first.total_pages == 2
    assert first.items[0]["date"] == "2024-02-12"
    assert len(first.items) == 10
    assert last.current_page == 2
    assert [j["content"] for j in last.items] == ["hari 2", "hari 1"]


def test_toggle_theme_persists(gateway, tmp_path):
    client = build_client(gateway=gateway, data_dir=tmp_path)

    assert client.theme == Theme.LIGHT
    assert client.toggle_theme() == Theme.DARK
    assert build_client(gateway=gateway, data_dir=tmp_path).theme == Theme.DARK


def test_student_flow_from_login_to_first_page(gateway, tmp_path):
    async def main():
        async with build_client(gateway=gateway, data_dir=tmp_path) as client:
            await client.controller.login(Role.STUDENT, "123456", "abc123")
            view = client.dashboard()
            await view.actions["add_journal"](
                {
                    "studentId": view.user["id"],
                    "date": "2024-07-15",
                    "category": view.data["journalCategories"][0],
                    "content": "Belajar matematika bab pecahan",
                }
            )
            return view, client.journal_page(1)

    view, page = asyncio.run(main())

    assert view.name == "student"
    assert (page.current_page, page.total_pages) == (1, 1)
    assert [j["content"] for j in page.items] == ["Belajar matematika bab pecahan"]
