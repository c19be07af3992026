#!/usr/bin/env python3
"""Smoke-check a running TaskSubmit backend: log in, list courses and submissions."""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

# REQUIRED: Add parent directory to Python path
sys.path.insert(0, str(Path(__file__).parent.parent))

from tasksubmit.context import AppContext
from tasksubmit.core.config import Settings
from tasksubmit.core.logging import setup_logging


async def run(email: str, password: str) -> int:
    # API_BASE_URL comes from the environment; storage stays in memory
    context = AppContext(Settings(CLIENT_STORAGE_URL="sqlite://"))
    context.start()

    print(f"🔐 Logging in as {email} against {context.client.base_url} ...")
    if not await context.session.login(email, password):
        print(f"❌ Login failed: {context.session.state.error}")
        return 1

    user = context.session.user
    print(f"✅ Logged in: {user.name} ({user.role.value})")

    if user.is_instructor:
        await context.load_instructor_dashboard()
        state = context.instructor_submissions.state
        if state.error:
            print(f"❌ Dashboard failed: {state.error}")
            return 1
        print(
            f"📊 Stats: total={state.stats.total} "
            f"pending={state.stats.pending} evaluated={state.stats.evaluated}"
        )
        print(f"📥 Inbox: {len(state.submissions)} submission(s)")
    else:
        await context.load_learner_dashboard()
        if context.courses.state.error or context.learner_submissions.state.error:
            print(f"❌ {context.courses.state.error or context.learner_submissions.state.error}")
            return 1
        print(f"📚 Courses: {len(context.courses.courses)}")
        for course in context.courses.courses:
            submission = context.learner_submissions.for_course(course.id)
            status = submission.status.value if submission else "not submitted"
            print(f"   - {course.name}: {status}")

    context.session.logout()
    return 0


def main() -> None:
    print("\n" + "=" * 70)
    print("  TASKSUBMIT BACKEND CHECK")
    print("=" * 70)

    # Get user credentials
    if len(sys.argv) >= 3:
        email = sys.argv[1]
        password = sys.argv[2]
    else:
        email = input("Email: ").strip()
        password = input("Password: ").strip()

    setup_logging("WARNING")
    code = asyncio.run(run(email, password))

    print("\n" + "=" * 70)
    print("  CHECK COMPLETE" if code == 0 else "  CHECK FAILED")
    print("=" * 70)
    sys.exit(code)


if __name__ == "__main__":
    main()
