"""
Readiness API routes - score submission and improvement planning.

Provides endpoints for:
- Storing a student's four scores and returning the readiness score
- Computing an improvement plan from four scores (no persistence)
"""

from typing import Optional
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from app.services.scoring import compute_readiness_score, build_improvement_plan
from app.services.student_store import StudentStore, StoreError, get_store
from app.logging_config import get_logger, log_with_context

router = APIRouter()
logger = get_logger("scoring")


# ── Pydantic schemas ─────────────────────────────────────────

class ReadinessRequest(BaseModel):
    """Schema for submitting a student's scores. Zero is a valid score."""
    name: Optional[str] = None
    aptitude: Optional[int] = None
    coding: Optional[int] = None
    resume: Optional[int] = None
    interview: Optional[int] = None


class ImprovementPlanRequest(BaseModel):
    """Schema for requesting an improvement plan."""
    aptitude: Optional[float] = None
    coding: Optional[float] = None
    resume: Optional[float] = None
    interview: Optional[float] = None


def _missing_scores(request) -> bool:
    return any(
        score is None
        for score in (request.aptitude, request.coding, request.resume, request.interview)
    )


@router.post("/readiness")
async def submit_readiness(request: ReadinessRequest, store: StudentStore = Depends(get_store)):
    """
    Persist the four scores for an existing student and return the readiness score.

    Unknown names get a 404; nothing is inserted.
    """
    if not request.name or _missing_scores(request):
        raise HTTPException(status_code=400, detail="Missing name or scores in request body")

    try:
        updated = await store.update_scores(
            request.name, request.aptitude, request.coding, request.resume, request.interview
        )
    except StoreError:
        raise HTTPException(status_code=500, detail="Failed to update scores")

    if not updated:
        raise HTTPException(status_code=404, detail="Student not found")

    readiness_score = compute_readiness_score(
        request.aptitude, request.coding, request.resume, request.interview
    )

    log_with_context(logger, "INFO",
        "Readiness computed for {}: {}".format(request.name, readiness_score),
        context={"name": request.name},
        extra_data={"readiness_score": readiness_score})

    return {"message": "Scores updated", "readinessScore": readiness_score}


@router.post("/improvement-plan")
async def improvement_plan(request: ImprovementPlanRequest):
    """Build the improvement plan for the given scores. Pure computation."""
    if _missing_scores(request):
        raise HTTPException(status_code=400, detail="Missing scores in request body")

    plan = build_improvement_plan(
        request.aptitude, request.coding, request.resume, request.interview
    )

    log_with_context(logger, "DEBUG", "Improvement plan built with {} entries".format(len(plan)))

    return {"improvementPlan": plan}
