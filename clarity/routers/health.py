"""Health check router."""

import logging
from pathlib import Path
from typing import Optional

from alembic.config import Config
from alembic.script import ScriptDirectory
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from clarity.db.session import get_db
from clarity.utils.time import utc_now_iso

logger = logging.getLogger(__name__)

router = APIRouter()

PROJECT_ROOT = Path(__file__).resolve().parents[2]


def migration_head(project_root: Path = PROJECT_ROOT) -> Optional[str]:
    """Newest revision shipped with the code, or None when it cannot be read."""
    ini_path = project_root / "alembic.ini"
    versions_dir = project_root / "alembic"
    if not ini_path.exists() or not versions_dir.exists():
        return None

    config = Config(str(ini_path))
    config.set_main_option("script_location", str(versions_dir))
    return ScriptDirectory.from_config(config).get_current_head()


async def _database_revision(db: AsyncSession) -> Optional[str]:
    try:
        result = await db.execute(text("SELECT version_num FROM alembic_version"))
    except SQLAlchemyError:
        # schema not managed by alembic
        await db.rollback()
        return None
    return result.scalar_one_or_none()


@router.get("/health")
async def health_check(db: AsyncSession = Depends(get_db)):
    """
    Liveness endpoint. Answers 200 while the process is up; the other
    fields say whether the database is reachable and migrated.
    """
    try:
        await db.execute(text("SELECT 1"))
        db_ok = True
    except SQLAlchemyError as exc:
        logger.warning("Health check could not reach the database: %s", exc)
        db_ok = False

    current = await _database_revision(db) if db_ok else None

    try:
        head = migration_head()
    except Exception as exc:
        logger.warning("Health check could not read migration scripts: %s", exc)
        head = None

    return {
        "status": "ok",
        "timestamp": utc_now_iso(),
        "db_ok": db_ok,
        "alembic_current": current,
        "alembic_head": head,
        "alembic_head_ok": bool(current and head and current == head),
    }
