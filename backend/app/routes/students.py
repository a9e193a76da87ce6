"""
Student API routes - lookup and registration of students by name.

Provides endpoints for:
- Fetching a stored student record
- Registering a student (returns the existing record if the name is known)
"""

from typing import Optional
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from app.services.student_store import (
    StudentStore, StoreError, DuplicateStudentError, get_store
)
from app.logging_config import get_logger, log_with_context

router = APIRouter()
logger = get_logger("http")


# ── Pydantic schemas ─────────────────────────────────────────

class StudentRequest(BaseModel):
    """Schema for registering a student."""
    name: Optional[str] = None


@router.get("/student/{name}")
async def get_student(name: str, store: StudentStore = Depends(get_store)):
    """Get the stored record for a student. Read-only."""
    try:
        student = await store.find_by_name(name)
    except StoreError:
        raise HTTPException(status_code=500, detail="Failed to fetch student data")

    if not student:
        raise HTTPException(status_code=404, detail="Student not found")

    return student.to_dict()


@router.post("/student")
async def register_student(request: StudentRequest, store: StudentStore = Depends(get_store)):
    """
    Register a student by name.

    If a record with this name already exists it is returned unchanged,
    otherwise a new record with all scores at 0 is created.
    """
    if not request.name:
        raise HTTPException(status_code=400, detail="Student name is required")

    try:
        student = await store.find_by_name(request.name)
    except StoreError:
        raise HTTPException(status_code=500, detail="Database error")

    if student:
        return {"message": "Student exists", "student": student.to_dict()}

    try:
        student = await store.insert_new(request.name)
    except DuplicateStudentError:
        # Lost a race with a concurrent registration of the same name
        try:
            student = await store.find_by_name(request.name)
        except StoreError:
            raise HTTPException(status_code=500, detail="Database error")
        if not student:
            raise HTTPException(status_code=500, detail="Failed to add student")
        return {"message": "Student exists", "student": student.to_dict()}
    except StoreError:
        raise HTTPException(status_code=500, detail="Failed to add student")

    log_with_context(logger, "INFO", "Student registered: {}".format(student.name),
                     context={"student_id": student.id})

    return {"message": "Student added", "student": student.to_dict()}
