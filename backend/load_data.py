"""
Data Loader Script - Seeds students and their scores via the API.

Reads a JSON list of students, registers each one with POST /student and
stores its scores with POST /readiness.

Usage:
    python load_data.py                                   # Uses default URL and file
    python load_data.py http://localhost:5000             # Custom API URL
    python load_data.py http://localhost:5000 data.json   # Custom data file

Each entry in the data file looks like:
    {"name": "Alice", "aptitude": 80, "coding": 90, "resume": 70, "interview": 60}
"""

import json
import sys
import os

import httpx

SCORE_FIELDS = ("aptitude", "coding", "resume", "interview")


def load_students(client: httpx.Client, students: list) -> list:
    """
    Register each student and submit its scores.

    Returns one result dict per student with a status of
    SCORED, REGISTERED (no scores given) or ERROR.
    """
    results = []
    for entry in students:
        name = entry.get("name")
        resp = client.post("/student", json={"name": name})
        if resp.status_code != 200:
            results.append({
                "name": name,
                "status": "ERROR",
                "reason": resp.json().get("error", "HTTP {}".format(resp.status_code))
            })
            continue

        scores = {field: entry.get(field) for field in SCORE_FIELDS}
        if any(value is None for value in scores.values()):
            results.append({"name": name, "status": "REGISTERED"})
            continue

        resp = client.post("/readiness", json={"name": name, **scores})
        if resp.status_code != 200:
            results.append({
                "name": name,
                "status": "ERROR",
                "reason": resp.json().get("error", "HTTP {}".format(resp.status_code))
            })
            continue

        results.append({
            "name": name,
            "status": "SCORED",
            "readiness_score": resp.json()["readinessScore"]
        })
    return results


def main():
    api_url = sys.argv[1] if len(sys.argv) > 1 else os.getenv("API_URL", "http://localhost:5000")

    if len(sys.argv) > 2:
        data_file = sys.argv[2]
    else:
        data_file = os.path.join(os.path.dirname(os.path.abspath(__file__)), "sample_students.json")

    if not os.path.exists(data_file):
        print(f"Error: Could not find {data_file}")
        sys.exit(1)

    print(f"Loading data from: {data_file}")
    with open(data_file, 'r') as f:
        students = json.load(f)

    print(f"Found {len(students)} students to load")
    print(f"Sending to: {api_url}")
    print()

    with httpx.Client(base_url=api_url, timeout=30.0) as client:
        results = load_students(client, students)

    print("=" * 60)
    print("LOAD SUMMARY")
    print("=" * 60)
    print(f"  Total:      {len(results)}")
    print(f"  Scored:     {sum(1 for r in results if r['status'] == 'SCORED')}")
    print(f"  Registered: {sum(1 for r in results if r['status'] == 'REGISTERED')}")
    print(f"  Errors:     {sum(1 for r in results if r['status'] == 'ERROR')}")
    print("=" * 60)
    print()

    for r in results:
        extra = ''
        if r['status'] == 'SCORED':
            extra = f" (readiness: {r['readiness_score']})"
        elif r['status'] == 'ERROR':
            extra = f" ({r['reason']})"
        print(f"  {r['name']}: {r['status']}{extra}")


if __name__ == "__main__":
    main()
