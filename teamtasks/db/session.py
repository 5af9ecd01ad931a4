from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from teamtasks.core.config import settings
from teamtasks.helpers.getters import isDebugMode
from teamtasks.logging import get_logger

logger = get_logger(__name__)


def build_async_database_url(database_url: str) -> str:
    """
    Turn a libpq style URL (postgres://...?sslmode=prefer) into the asyncpg
    dialect URL SQLAlchemy expects; sslmode becomes asyncpg's ssl argument.
    """
    url = make_url(database_url).set(drivername="postgresql+asyncpg")
    query = dict(url.query)
    sslmode = query.pop("sslmode", None)
    if sslmode is not None:
        query["ssl"] = sslmode
    return url.set(query=query).render_as_string(hide_password=False)


ASYNC_DATABASE_URL = build_async_database_url(settings.DATABASE_URL)

if isDebugMode():
    logger.info("Debug mode: echoing SQL statements")

engine = create_async_engine(
    ASYNC_DATABASE_URL,
    pool_size=settings.DB_POOL_SIZE,
    pool_pre_ping=True,
    echo=settings.DB_ECHO or isDebugMode(),
)
SessionAsync = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
