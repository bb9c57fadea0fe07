"""Master-data tables: listing for filter choices, plus add/delete."""
import logging

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from db.models import City, Department, EmployeeRange, Industry, JobLevel, TurnoverRange

logger = logging.getLogger(__name__)

# table key -> (model, primary key column, display column)
MASTER_TABLES = {
    "industries": (Industry, Industry.industry_id, Industry.industry_vertical),
    "cities": (City, City.city_id, City.city),
    "departments": (Department, Department.id, Department.department_name),
    "job_levels": (JobLevel, JobLevel.id, JobLevel.job_level_name),
    "turnover_ranges": (TurnoverRange, TurnoverRange.id, TurnoverRange.turnover_range),
    "employee_ranges": (EmployeeRange, EmployeeRange.id, EmployeeRange.employee_range),
}


def _table(kind: str):
    try:
        return MASTER_TABLES[kind]
    except KeyError:
        raise ValueError(
            f"Unknown master table {kind!r}. Expected one of: {', '.join(MASTER_TABLES)}"
        ) from None


async def list_entries(session: AsyncSession, kind: str) -> list:
    """Return all rows of a master table ordered by display name."""
    model, _, label = _table(kind)
    result = await session.execute(select(model).order_by(label))
    return list(result.scalars().all())


async def add_entry(session: AsyncSession, kind: str, data: dict):
    model, _, _ = _table(kind)
    entry = model(**data)
    session.add(entry)
    await session.flush()
    return entry


async def delete_entry(session: AsyncSession, kind: str, entry_id: int) -> bool:
    model, pk, _ = _table(kind)
    result = await session.execute(delete(model).where(pk == entry_id).returning(pk))
    await session.flush()
    return result.scalar_one_or_none() is not None
