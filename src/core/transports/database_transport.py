import asyncio
import json
import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Column, DateTime, Float, Integer, String, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from core.models.config_data import DatabaseConfig
from core.telemetry_cache import TelemetryCache
from core.transports.base import Transport, TransportError, TransportState

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


class TaskRecord(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True)
    name = Column(String(200), nullable=False)
    status = Column(String(20), nullable=False, default="pending")
    progress = Column(Float, nullable=False, default=0.0)


class ControlCommandRecord(Base):
    __tablename__ = "control_commands"

    id = Column(Integer, primary_key=True, autoincrement=True)
    kind = Column(String(20), nullable=False)
    value = Column(String(50), nullable=False)
    payload = Column(String(500), nullable=False)
    created_at = Column(DateTime, nullable=False, default=lambda: datetime.now(timezone.utc))


class DatabaseTransport(Transport):
    """
    Reads the task list from a SQL database and records control commands in it.

    Only tasks are stored upstream; robot, sensor and statistics reads are
    served from the cache.
    """

    transport_type = "database"

    def __init__(self, cache: TelemetryCache, config: DatabaseConfig):
        super().__init__(cache)
        self.config = config
        self._engine: Optional[AsyncEngine] = None
        self._session: Optional[async_sessionmaker[AsyncSession]] = None

    async def connect(self) -> None:
        if self._engine is not None:
            return
        self._set_state(TransportState.CONNECTING)
        engine = create_async_engine(self.config.url)
        try:
            async with asyncio.timeout(self.config.timeout):
                async with engine.begin() as conn:
                    await conn.run_sync(Base.metadata.create_all)
        except (SQLAlchemyError, OSError, TimeoutError) as e:
            logger.error(f"Database {self.config.url} unavailable: {e}")
            await engine.dispose()
            self._set_state(TransportState.DISCONNECTED)
            return
        self._engine = engine
        self._session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
        self._set_state(TransportState.CONNECTED)

    async def disconnect(self) -> None:
        engine, self._engine = self._engine, None
        self._session = None
        if engine is not None:
            await engine.dispose()
        self._set_state(TransportState.DISCONNECTED)

    async def refresh(self, category: str) -> bool:
        if category != "tasks" or self._session is None:
            return False
        try:
            async with asyncio.timeout(self.config.timeout):
                async with self._session() as session:
                    result = await session.execute(select(TaskRecord).order_by(TaskRecord.id))
                    rows = result.scalars().all()
        except (SQLAlchemyError, OSError, TimeoutError) as e:
            logger.error(f"Failed to read tasks from database: {e}")
            return False
        return self.on_telemetry("tasks", [
            {"id": row.id, "name": row.name, "status": row.status, "progress": row.progress}
            for row in rows
        ])

    async def _send(self, message: dict) -> None:
        if self._session is None:
            raise TransportError("database not connected")
        kind = message["type"]
        record = ControlCommandRecord(
            kind=kind,
            value=message[kind],
            payload=json.dumps(message, ensure_ascii=False),
        )
        try:
            async with asyncio.timeout(self.config.timeout):
                async with self._session() as session:
                    session.add(record)
                    await session.commit()
        except (SQLAlchemyError, OSError, TimeoutError) as e:
            raise TransportError(str(e)) from e
