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

from jobmete.core.config import settings
from jobmete.db.session import get_db

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


def _load_alembic_head() -> Optional[str]:
    project_root = Path(__file__).resolve().parents[2]
    cfg_path = project_root / "alembic.ini"
    script_location = project_root / "alembic"
    if not cfg_path.exists() or not script_location.exists():
        return None

    config = Config(str(cfg_path))
    config.set_main_option("script_location", str(script_location))
    return ScriptDirectory.from_config(config).get_current_head()


async def _current_revision(db: AsyncSession) -> Optional[str]:
    try:
        result = await db.execute(text("SELECT version_num FROM alembic_version"))
    except SQLAlchemyError as exc:
        # Schema created without migrations (tests) or not migrated yet
        logger.info("alembic_version not readable: %s", exc)
        await db.rollback()
        return None
    return result.scalar_one_or_none()


@router.get("/health")
async def health_check(db: AsyncSession = Depends(get_db)):
    """Report API, database and migration status."""
    db_ok = True
    alembic_current: Optional[str] = None

    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError as exc:
        logger.warning("Database health check failed: %s", exc)
        await db.rollback()
        db_ok = False

    if db_ok:
        alembic_current = await _current_revision(db)

    alembic_head = _load_alembic_head()

    return {
        "app": settings.APP_NAME,
        "apiOk": True,
        "dbOk": db_ok,
        "alembicHeadOk": bool(alembic_current and alembic_current == alembic_head),
        "alembicCurrent": alembic_current,
        "alembicHead": alembic_head,
    }
