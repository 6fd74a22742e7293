"""비동기 DB 연결 (SQLAlchemy 2.0 + aiosqlite / aiomysql)."""
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def create_engine(database_url: str, *, echo: bool = False) -> AsyncEngine:
    """URL 드라이버에 맞춰 엔진 생성. SQLite는 커넥션 풀 옵션을 받지 않음."""
    if database_url.startswith("sqlite"):
        return create_async_engine(database_url, echo=echo)
    return create_async_engine(
        database_url,
        echo=echo,
        pool_pre_ping=True,
        pool_size=5,
        max_overflow=10,
    )


def create_sessionmaker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False,
    )


async def init_db(engine: AsyncEngine) -> None:
    """앱 기동 시 테이블 생성."""
    # 모델 등록 (create_all 대상)
    from .. import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
