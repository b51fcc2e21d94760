from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.orm import DeclarativeBase
from app.core.config import settings

engine = create_async_engine(settings.DATABASE_URL, echo=settings.SQL_ECHO)

# Keep loaded attributes usable after commit, the async session can't lazy-refresh them
AsyncSessionLocal = async_sessionmaker(
    bind=engine, class_=AsyncSession, expire_on_commit=False
)


# One session per request, closed when the route is done
async def get_db():
    async with AsyncSessionLocal() as session:
        yield session


# Every model registered on Base gets created on startup
class Base(DeclarativeBase):
    pass
