# fixtures.py
# Static demo data loaded into every new session store.
from __future__ import annotations

from typing import Dict, List

from domain import BillingType, Person, Project, Role, TaskEntry, TaskStatus

DEMO_USERS: List[Person] = [
    Person(1, "Admin One", "admin@timey.com", Role.ADMIN),
    Person(2, "Employee One", "emp1@timey.com", Role.EMPLOYEE),
    Person(3, "Employee Two", "emp2@timey.com", Role.EMPLOYEE),
    Person(4, "Employee Three", "emp3@timey.com", Role.EMPLOYEE),
    Person(5, "Employee Four", "emp4@timey.com", Role.EMPLOYEE),
    Person(6, "Employee Five", "emp5@timey.com", Role.EMPLOYEE),
]

PROJECTS: List[Project] = [
    Project(1, "Website Redesign", "PRJ-001", 1, "Acme Corporation", (2, 3)),
    Project(2, "Mobile App", "PRJ-002", 2, "Global Solutions Pvt Ltd", (2, 4), status="On Hold"),
    Project(3, "Internal Tools", "PRJ-003", 3, "Nordic Tech AB", (3, 5), status="Completed"),
    Project(4, "Marketing Site", "PRJ-004", 4, "BrightStart Education", (2,)),
    Project(5, "Client Portal", "PRJ-005", 5, "FinEdge Capital", (4, 5)),
]

_B = BillingType.BILLABLE
_N = BillingType.NON_BILLABLE


def _t(task_id, project_id, name, hours, assignees, day, status, billing, description=None):
    project = PROJECTS_BY_ID[project_id]
    return TaskEntry(
        task_id=task_id,
        project_id=project_id,
        project_name=project.name,
        name=name,
        worked_hours=hours,
        assignee_ids=list(assignees),
        work_date=day,
        status=TaskStatus(status),
        billing_type=billing,
        description=description,
    )


PROJECTS_BY_ID: Dict[int, Project] = {p.id: p for p in PROJECTS}
PEOPLE_BY_ID: Dict[int, Person] = {u.id: u for u in DEMO_USERS}


def initial_tasks() -> List[TaskEntry]:
    """Fresh copies of the seed entries (week of 2025-12-15)."""
    return [
        _t(1, 1, "Create homepage layout", 2, [2], "2025-12-15", "Completed", _B,
           "Created initial homepage wireframe and sections structure."),
        _t(2, 1, "Implement responsive styles", 3, [2, 3], "2025-12-16", "In Progress", _B,
           "Added responsive breakpoints for header and hero section."),
        _t(3, 1, "Set up design system", 1.5, [3], "2025-12-17", "In Progress", _N,
           "Defined color tokens and typography scale in Figma."),
        _t(4, 1, "Integrate CMS content", 2.75, [2, 4], "2025-12-18", "Not Started", _B),
        _t(5, 2, "Set up authentication flow", 4, [3], "2025-12-15", "Completed", _B,
           "Implemented login, logout and session handling."),
        _t(6, 2, "Build dashboard screen", 2.5, [3, 5], "2025-12-16", "In Progress", _B,
           "Created cards layout and basic navigation."),
        _t(7, 2, "API error handling", 1, [5], "2025-12-17", "Not Started", _N),
        _t(8, 3, "Employee list page", 2, [4], "2025-12-15", "Completed", _B,
           "Implemented table with pagination and basic filters."),
        _t(9, 3, "Timesheet summary API", 3.25, [4, 6], "2025-12-16", "In Progress", _B,
           "Aggregated hours per employee and per project."),
        _t(10, 3, "Permissions and roles", 1.5, [6], "2025-12-18", "Not Started", _N),
        _t(11, 4, "Landing page hero section", 2.25, [2], "2025-12-19", "In Progress", _B,
           "Added headline, CTA button, and background illustration."),
        _t(12, 4, "SEO meta tags and sitemap", 1.75, [5], "2025-12-19", "Not Started", _B),
        _t(13, 5, "Client dashboard widgets", 3.5, [3, 4], "2025-12-20", "In Progress", _B,
           "Implemented cards for invoices, tasks, and support tickets."),
        _t(14, 5, "Notification settings page", 2, [6], "2025-12-20", "Not Started", _N),
        _t(15, 1, "Bug fixes from QA", 1.25, [2], "2025-12-21", "In Progress", _B,
           "Fixed spacing and alignment issues on mobile."),
        _t(16, 2, "Refactor state management", 2, [3], "2025-12-21", "Not Started", _N),
        # Second sessions: task 3 continued on another day, task 6 logged twice on the same day
        _t(3, 1, "Set up design system", 2, [3], "2025-12-18", "In Progress", _N),
        _t(6, 2, "Build dashboard screen", 1.5, [5], "2025-12-16", "In Progress", _B),
    ]


def employees() -> List[Person]:
    return [u for u in DEMO_USERS if u.role == Role.EMPLOYEE]
