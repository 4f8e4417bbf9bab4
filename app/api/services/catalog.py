"""
Fish and season catalogs
"""

from typing import Iterable, List

from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from config.constants import SEASONS
from app.core.logger import get_logger
from app.models import Fish, Season

logger = get_logger(__name__)


def dialect_insert(db: AsyncSession):
    """Dialect insert construct supporting ON CONFLICT DO NOTHING"""
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        return postgresql.insert
    if dialect == "sqlite":
        return sqlite.insert
    raise NotImplementedError(f"Upsert is not supported for dialect {dialect}")


async def get_or_create_fish(db: AsyncSession, names: Iterable[str]) -> List[Fish]:
    """
    Resolve fish names, inserting the missing ones.

    The insert relies on the unique name constraint (ON CONFLICT DO NOTHING),
    so concurrent requests naming the same new fish cannot create duplicates.
    Names are matched case-sensitively; the result follows input order.
    """
    names = list(dict.fromkeys(names))
    if not names:
        return []

    insert = dialect_insert(db)
    await db.execute(
        insert(Fish)
        .values([{"name": name} for name in names])
        .on_conflict_do_nothing(index_elements=["name"])
    )

    result = await db.execute(select(Fish).where(Fish.name.in_(names)))
    by_name = {fish.name: fish for fish in result.scalars()}
    return [by_name[name] for name in names if name in by_name]


async def resolve_seasons(db: AsyncSession, codes: Iterable[str]) -> List[Season]:
    """Existing seasons for the given codes; unknown codes are dropped"""
    codes = list(dict.fromkeys(codes))
    if not codes:
        return []
    result = await db.execute(select(Season).where(Season.code.in_(codes)))
    by_code = {season.code: season for season in result.scalars()}
    return [by_code[code] for code in codes if code in by_code]


async def ensure_seasons(db: AsyncSession) -> int:
    """Insert the fixed season set if missing; returns rows inserted"""
    insert = dialect_insert(db)
    result = await db.execute(
        insert(Season)
        .values([{"code": code, "name": name} for code, name in SEASONS.items()])
        .on_conflict_do_nothing(index_elements=["code"])
    )
    inserted = max(result.rowcount or 0, 0)
    if inserted:
        logger.info(f"Seeded {inserted} seasons")
    return inserted


async def list_fish(db: AsyncSession) -> List[Fish]:
    result = await db.execute(select(Fish).order_by(Fish.name))
    return list(result.scalars())


async def list_seasons(db: AsyncSession) -> List[Season]:
    result = await db.execute(select(Season).order_by(Season.id))
    return list(result.scalars())
