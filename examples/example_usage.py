"""Example: driving the client without any UI.

Logs in against a running backend (API_BASE_URL), prints the dashboard the
role gets, then adds a journal entry and shows the first journal page.
"""

import asyncio
import sys
from pathlib import Path

SRC_DIR = Path(__file__).resolve().parents[1] / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from school_journal.client.context import build_client
from school_journal.core.enums import Role


async def main():
    async with build_client() as client:
        controller = client.controller
        if not controller.is_authenticated:
            await controller.login(Role.STUDENT, "123456", "abc123")

        view = client.dashboard()
        print(f"{view.name} dashboard for {view.user['name']} ({controller.state.value})")

        await view.actions["add_journal"](
            {
                "studentId": view.user["id"],
                "date": "2024-07-15",
                "category": view.data["journalCategories"][0],
                "content": "Belajar matematika bab pecahan",
            }
        )
        page = client.journal_page(1)
        print(f"page {page.current_page}/{page.total_pages}")
        for entry in page.items:
            print(f"  {entry['date']}  {entry['category']:<20} {entry['content']}")


if __name__ == "__main__":
    asyncio.run(main())
