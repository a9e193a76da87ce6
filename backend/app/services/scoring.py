"""
Scoring Service - readiness score and improvement plan.

Pure functions, no I/O:
1. readiness = aptitude*0.3 + coding*0.4 + resume*0.2 + interview*0.1,
   rounded to the nearest integer with halves rounded up
2. improvement plan = one recommendation per dimension scoring below 75,
   in the order aptitude, coding, resume, interview

Scores are not clamped to any range.
"""

import math

# Weights sum to 1.0
READINESS_WEIGHTS = {
    "aptitude": 0.3,
    "coding": 0.4,
    "resume": 0.2,
    "interview": 0.1,
}

IMPROVEMENT_THRESHOLD = 75

# (dimension, title, description, priority) in output order
RECOMMENDATIONS = [
    ("aptitude", "Improve Aptitude",
     "Practice speed math and logical reasoning.", "high"),
    ("coding", "Enhance Coding Skills",
     "Solve more coding problems and participate in contests.", "high"),
    ("resume", "Strengthen Resume",
     "Add impactful projects and achievements.", "medium"),
    ("interview", "Practice Interviewing",
     "Conduct mock interviews and get feedback.", "medium"),
]


def compute_readiness_score(aptitude, coding, resume, interview) -> int:
    """
    Weighted readiness score.

    Ties round up (2.5 -> 3), not to even as the builtin round() does.
    """
    weighted = (
        aptitude * READINESS_WEIGHTS["aptitude"]
        + coding * READINESS_WEIGHTS["coding"]
        + resume * READINESS_WEIGHTS["resume"]
        + interview * READINESS_WEIGHTS["interview"]
    )
    return int(math.floor(weighted + 0.5))


def build_improvement_plan(aptitude, coding, resume, interview) -> list:
    """Return a {title, description, priority} entry for each score below the threshold."""
    scores = {
        "aptitude": aptitude,
        "coding": coding,
        "resume": resume,
        "interview": interview,
    }
    plan = []
    for dimension, title, description, priority in RECOMMENDATIONS:
        if scores[dimension] < IMPROVEMENT_THRESHOLD:
            plan.append({
                "title": title,
                "description": description,
                "priority": priority
            })
    return plan
