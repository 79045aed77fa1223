#!/usr/bin/env python3
"""
Seed script: populate a running server with demo settings, projects and tasks.

    uvicorn task_manager.main:app &
    python scripts/seed_data.py [API_URL]

Settings lists are replaced; projects and tasks are appended.
"""

import sys

import requests

API_URL = "http://localhost:8000/api"
HEADERS = {"Content-Type": "application/json"}

TYPES = [
    {"name": "Admin", "color": "#6C757D"},
    {"name": "Urgent", "color": "#DC3545"},
    {"name": "Regular", "color": "#0066CC"},
    {"name": "Night", "color": "#343A40"},
    {"name": "Weekend", "color": "#28A745"},
    {"name": "Backlog", "color": "#FFC107"},
    {"name": "Others", "color": "#6F42C1"},
]

STATUSES = [
    {"name": "Must do", "color": "#FF6B6B"},
    {"name": "Waiting others", "color": "#1D1D1F"},
    {"name": "My action", "color": "#FFD93D"},
    {"name": "Done", "color": "#6BCF7F"},
]

PERSONS = [
    {"name": "Efa"},
    {"name": "Shirley"},
    {"name": "Joelle"},
    {"name": "Ying Wen"},
]

PROJECTS = [
    {
        "name": "Website Redesign",
        "notes": (
            "<p>Modernize company website with new branding.</p>"
            "<h3>Key objectives:</h3><ul><li>Improve mobile responsiveness</li>"
            "<li>Update color scheme to match new brand guidelines</li>"
            "<li>Optimize page load speed</li></ul>"
        ),
    },
    {
        "name": "Q1 Planning",
        "notes": (
            "<p>Strategic planning for Q1.</p><h3>Focus areas:</h3>"
            "<ol><li>Revenue targets</li><li>Team expansion</li>"
            "<li>Product roadmap priorities</li></ol>"
        ),
    },
    {
        "name": "Client Onboarding System",
        "notes": (
            "<p>Build automated onboarding flow for new clients.</p>"
            "<ul><li>Welcome email sequence</li><li>Documentation portal</li>"
            "<li>Kickoff meeting scheduler</li></ul>"
        ),
    },
]

# project name -> tasks; "persons" are names from PERSONS, "also" are extra projects
TASKS = {
    "Website Redesign": [
        {"name": "Review design mockups", "type": "Urgent", "status": "Must do",
         "start_date": "19/Jan", "due_date": "25/Jan", "persons": ["Efa"]},
        {"name": "Update homepage copy", "type": "Regular", "status": "My action",
         "due_date": "28/Jan", "persons": ["Shirley"]},
        {"name": "Get feedback from CEO", "type": "Regular", "status": "Waiting others"},
    ],
    "Q1 Planning": [
        {"name": "Finalize Q1 OKRs", "type": "Urgent", "status": "Must do",
         "due_date": "24/Jan", "persons": ["Efa", "Joelle"]},
        {"name": "Schedule team kickoff", "type": "Admin", "status": "My action",
         "due_date": "27/Jan", "also": ["Client Onboarding System"]},
        {"name": "Review budget proposals", "type": "Regular", "status": "Done",
         "due_date": "20/Jan"},
    ],
    "Client Onboarding System": [
        {"name": "Draft welcome email template", "type": "Regular", "status": "My action",
         "persons": ["Ying Wen"]},
        {"name": "Build documentation site", "type": "Backlog", "status": "Waiting others"},
    ],
}


def put(path: str, payload: dict) -> list:
    response = requests.put(f"{API_URL}{path}", json=payload, headers=HEADERS)
    response.raise_for_status()
    return response.json()


def post(path: str, payload: dict) -> dict:
    response = requests.post(f"{API_URL}{path}", json=payload, headers=HEADERS)
    response.raise_for_status()
    return response.json()


def main():
    print("Seeding settings...")
    put("/settings/types", {"types": TYPES})
    put("/settings/statuses", {"statuses": STATUSES})
    persons = put("/settings/persons", {"persons": PERSONS})
    person_ids = {p["name"]: p["id"] for p in persons}
    print(f"  {len(TYPES)} types, {len(STATUSES)} statuses, {len(persons)} people")

    print("Creating projects...")
    project_ids = {}
    for project in PROJECTS:
        created = post("/projects", project)
        project_ids[created["name"]] = created["id"]
        print(f"  ✓ {created['name']} (id={created['id']})")

    print("Creating tasks...")
    total = 0
    for project_name, tasks in TASKS.items():
        for task in tasks:
            payload = {k: v for k, v in task.items() if k not in ("persons", "also")}
            payload["project_ids"] = [project_ids[project_name]] + [
                project_ids[name] for name in task.get("also", [])
            ]
            payload["person_ids"] = [person_ids[name] for name in task.get("persons", [])]
            post("/tasks", payload)
            total += 1
    print(f"  ✓ {total} tasks")


if __name__ == "__main__":
    if len(sys.argv) > 1:
        API_URL = sys.argv[1].rstrip("/")
    try:
        main()
    except requests.RequestException as e:
        print(f"Seeding failed: {e}")
        sys.exit(1)
