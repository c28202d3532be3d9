"""One-off content and user import from JSON files.

Reads ``lessons.json``, ``scenarios.json`` and ``users.json`` from a directory
and inserts their rows. Each file is imported in its own transaction; a file
that fails validation imports nothing. Missing files are skipped.

Usage: slp-import-data ./data        (or: python -m slp.migrate ./data)
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from slp.auth.password import PasswordStrengthError, hash_password, validate_password_strength
from slp.auth.schemas import RegisterRequest
from slp.config import get_settings
from slp.content.schemas import LessonIn, ScenarioIn
from slp.database import Database, atomic
from slp.db.models import Lesson, Scenario, ScenarioChoice, User

logger = logging.getLogger(__name__)

_lessons = TypeAdapter(list[LessonIn])
_scenarios = TypeAdapter(list[ScenarioIn])
_users = TypeAdapter(list[RegisterRequest])


def _read(path: Path) -> Any | None:  # noqa: ANN401
    if not path.exists():
        logger.warning("Skipping %s: file not found", path)
        return None
    return json.loads(path.read_text(encoding="utf-8"))


async def import_lessons(db: AsyncSession, raw: Any) -> int:  # noqa: ANN401
    lessons = _lessons.validate_python(raw)
    async with atomic(db):
        db.add_all(
            Lesson(
                title=item.title,
                content=item.content,
                media_type=item.media_type,
                media_url=item.media_url,
                difficulty=item.difficulty,
            )
            for item in lessons
        )
    return len(lessons)


async def import_scenarios(db: AsyncSession, raw: Any) -> int:  # noqa: ANN401
    scenarios = _scenarios.validate_python(raw)
    async with atomic(db):
        for item in scenarios:
            db.add(
                Scenario(
                    title=item.title,
                    description=item.description,
                    media_type=item.media_type,
                    media_url=item.media_url,
                    difficulty=item.difficulty,
                    choices=[
                        ScenarioChoice(choice_text=c.text, outcome=c.outcome, survivability=c.survivability)
                        for c in item.choices
                    ],
                )
            )
    return len(scenarios)


async def import_users(db: AsyncSession, raw: Any) -> int:  # noqa: ANN401
    """Insert users with hashed secrets.

    Usernames that already exist, and passwords that /register would reject,
    are logged and skipped.
    """
    users = _users.validate_python(raw)
    async with atomic(db):
        existing = set((await db.execute(select(User.username))).scalars().all())
        created = 0
        for item in users:
            if item.username in existing:
                logger.warning("Skipping user %s: username already exists", item.username)
                continue
            try:
                validate_password_strength(item.password)
            except PasswordStrengthError as e:
                logger.warning("Skipping user %s: %s", item.username, e)
                continue
            db.add(
                User(
                    username=item.username,
                    password_hash=hash_password(item.password),
                    security_question=item.security_question,
                    security_answer_hash=(
                        hash_password(item.security_answer.strip().lower()) if item.security_answer else None
                    ),
                )
            )
            existing.add(item.username)
            created += 1
    return created


async def import_data(db: AsyncSession, data_dir: Path) -> dict[str, int]:
    """Import every known file found in ``data_dir``. Returns rows inserted per file."""
    counts: dict[str, int] = {}
    steps = (
        ("lessons", import_lessons),
        ("scenarios", import_scenarios),
        ("users", import_users),
    )
    for name, importer in steps:
        raw = _read(data_dir / f"{name}.json")
        if raw is None:
            continue
        counts[name] = await importer(db, raw)
        logger.info("Imported %d %s", counts[name], name)
    return counts


async def _run(data_dir: Path) -> dict[str, int]:
    database = Database.from_settings(get_settings())
    try:
        async with database.session() as db:
            return await import_data(db, data_dir)
    finally:
        await database.dispose()


def main(argv: list[str] | None = None) -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    parser = argparse.ArgumentParser(description="Import lessons, scenarios and users from JSON files.")
    parser.add_argument("data_dir", type=Path, help="directory holding lessons.json, scenarios.json, users.json")
    args = parser.parse_args(argv)
    asyncio.run(_run(args.data_dir))


if __name__ == "__main__":
    main()
