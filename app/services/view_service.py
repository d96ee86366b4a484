"""Grouping and statistics over a set of tasks. Pure functions, no I/O."""

from typing import Dict, List, Sequence

from app.schemas.task import FilterOptions

PRIORITY_ORDER = ["high", "medium", "low"]


def derive_groups(tasks: Sequence, filters: FilterOptions) -> List[Dict]:
    """
    Build the display groups for a task list.

    1. sort by position (ties by id)
    2. drop completed tasks unless show_completed, keep only filters.priority if set
    3. group: one "All Tasks" group, or per priority (high/medium/low),
       or per status (In Progress / Completed)

    Empty groups are kept so the client can render an empty state.
    """
    ordered = sorted(tasks, key=lambda t: (t.position or 0, t.id))

    filtered = [
        t for t in ordered
        if (filters.show_completed or not t.completed)
        and (filters.priority is None or t.priority == filters.priority)
    ]

    if filters.group_by == "priority":
        return [
            {
                "title": f"{priority.capitalize()} Priority",
                "tasks": [t for t in filtered if t.priority == priority]
            }
            for priority in PRIORITY_ORDER
        ]

    if filters.group_by == "status":
        return [
            {"title": "In Progress", "tasks": [t for t in filtered if not t.completed]},
            {"title": "Completed", "tasks": [t for t in filtered if t.completed]},
        ]

    return [{"title": "All Tasks", "tasks": filtered}]


def compute_stats(tasks: Sequence) -> Dict:
    total = len(tasks)
    completed = sum(1 for t in tasks if t.completed)
    completion_rate = round(completed / total * 100) if total else 0

    by_priority = {priority: 0 for priority in PRIORITY_ORDER}
    for t in tasks:
        if t.priority in by_priority:
            by_priority[t.priority] += 1

    return {
        "total": total,
        "completed": completed,
        "completion_rate": completion_rate,
        "by_priority": by_priority
    }
