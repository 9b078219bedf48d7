"""
Database configuration for the RentRoll backend.

Async SQLAlchemy engine, session factory and declarative base shared by all
modules.
"""

from collections.abc import AsyncIterator
from datetime import datetime

from sqlalchemy import DateTime, Integer
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import Mapped, declarative_base, mapped_column
from sqlalchemy.sql import func

from .config import settings

# Create async engine with SSL support for MySQL
connect_args = {}
if settings.database_url.startswith("mysql+asyncmy"):
    connect_args = {
        "ssl": {
            "ssl_check_hostname": settings.database_ssl_check_hostname,
            "ssl_verify_cert": settings.database_ssl_verify_cert,
            "ssl_verify_identity": settings.database_ssl_verify_identity,
        },
    }

engine = create_async_engine(
    settings.database_url,
    echo=settings.database_echo,
    future=True,
    connect_args=connect_args,
    pool_pre_ping=True,
    pool_recycle=3600,
)

# Create async session factory
AsyncSessionLocal = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)

# Base class
Base = declarative_base()


class IdentityMixin:
    """Mixin adding an autoincrement integer primary key."""

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)


class TimestampMixin:
    """Mixin to add created and updated timestamps to models."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )


async def get_db() -> AsyncIterator[AsyncSession]:
    """Dependency to get database session.

    Anything left uncommitted when the request ends is rolled back.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


def import_models() -> None:
    """Register every model with ``Base.metadata``."""
    from .modules.auth import models as auth_models  # noqa: F401
    from .modules.property_management import models as property_models  # noqa: F401
    from .modules.rent_management import models as rent_models  # noqa: F401

