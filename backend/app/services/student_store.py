"""
Student Record Store - the only component that touches the students table.

A single StudentStore is opened at application startup, handed to the
route handlers through the get_store dependency, and closed at shutdown.
Every operation runs in its own short session and commits before
returning. Any SQLAlchemy failure surfaces as StoreError; nothing is retried.
"""

import time
from typing import Optional
from fastapi import Request
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker

from app.database import build_engine, create_tables
from app.models.student import Student
from app.logging_config import get_logger, log_with_context

logger = get_logger("db")


class StoreError(Exception):
    """Generic persistence failure. No distinction between transient and permanent."""


class DuplicateStudentError(StoreError):
    """Raised when inserting a name that already has a row."""


class StudentStore:
    """Async access to the students table."""

    def __init__(self, database_url: str):
        self.database_url = database_url
        self.engine: Optional[AsyncEngine] = None
        self._session_factory: Optional[async_sessionmaker] = None

    async def open(self):
        """Create the engine and the students table if it does not exist yet."""
        self.engine = build_engine(self.database_url)
        self._session_factory = async_sessionmaker(self.engine, expire_on_commit=False)
        try:
            await create_tables(self.engine)
        except SQLAlchemyError as e:
            log_with_context(logger, "ERROR", "Failed to create students table: {}".format(str(e)))
            await self.close()
            raise StoreError("Failed to initialise database") from e

        log_with_context(logger, "INFO", "Connected to the SQLite database.",
                         extra_data={"database_url": self.database_url})

    async def close(self):
        if self.engine is not None:
            await self.engine.dispose()
            self.engine = None
            self._session_factory = None
            log_with_context(logger, "INFO", "Database connection closed")

    def _session(self):
        if self._session_factory is None:
            raise StoreError("Student store is not open")
        return self._session_factory()

    async def find_by_name(self, name: str) -> Optional[Student]:
        """Exact, case-sensitive lookup by name. Returns None when absent."""
        start_time = time.time()
        try:
            async with self._session() as session:
                result = await session.execute(select(Student).where(Student.name == name))
                student = result.scalars().first()
        except SQLAlchemyError as e:
            log_with_context(logger, "ERROR", "Failed to look up student: {}".format(str(e)),
                             context={"name": name})
            raise StoreError("Failed to look up student") from e

        duration_ms = (time.time() - start_time) * 1000
        log_with_context(logger, "DEBUG",
            "Student lookup {}".format("hit" if student else "miss"),
            context={"name": name},
            extra_data={"duration_ms": round(duration_ms, 2)})
        return student

    async def insert_new(self, name: str) -> Student:
        """
        Insert a student with all four scores at 0 and return it with its new id.

        Callers are expected to have checked find_by_name first; a name
        that already exists is rejected by the unique constraint and
        reported as DuplicateStudentError.
        """
        student = Student(name=name, aptitude=0, coding=0, resume=0, interview=0)
        try:
            async with self._session() as session:
                session.add(student)
                await session.commit()
        except IntegrityError as e:
            log_with_context(logger, "WARNING", "Student already exists: {}".format(name),
                             context={"name": name})
            raise DuplicateStudentError("Student already exists") from e
        except SQLAlchemyError as e:
            log_with_context(logger, "ERROR", "Failed to insert student: {}".format(str(e)),
                             context={"name": name})
            raise StoreError("Failed to insert student") from e

        log_with_context(logger, "INFO", "Created new student: {}".format(name),
                         context={"name": name, "student_id": student.id})
        return student

    async def update_scores(self, name: str, aptitude: int, coding: int,
                            resume: int, interview: int) -> bool:
        """
        Overwrite all four scores of the row matching name in one statement.

        Returns False when no row matches.
        """
        stmt = (
            update(Student)
            .where(Student.name == name)
            .values(aptitude=aptitude, coding=coding, resume=resume, interview=interview)
        )
        try:
            async with self._session() as session:
                result = await session.execute(stmt)
                await session.commit()
        except (SQLAlchemyError, OverflowError) as e:
            # OverflowError: sqlite3 rejects integers wider than 64 bits before SQLAlchemy sees them
            log_with_context(logger, "ERROR", "Failed to update scores: {}".format(str(e)),
                             context={"name": name})
            raise StoreError("Failed to update scores") from e

        updated = result.rowcount > 0
        log_with_context(logger, "INFO" if updated else "DEBUG",
            "Scores {} for {}".format("updated" if updated else "not updated", name),
            context={"name": name},
            extra_data={"aptitude": aptitude, "coding": coding,
                        "resume": resume, "interview": interview})
        return updated


def get_store(request: Request) -> StudentStore:
    """FastAPI dependency returning the store opened at startup."""
    return request.app.state.store
