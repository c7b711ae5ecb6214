TASK_PREFIX = "/api/tasks"
TASK_TAG = "Tasks"

TASK_ROUTES = {
    "create": "",
    "list": "",
    "stats": "/stats",
    "get": "/{task_id}",
    "update": "/{task_id}",
    "delete": "/{task_id}",
}

STATS_PREFIX = "/api"
STATS_TAG = "Statistics"

STATS_ROUTES = {
    "stats": "/stats",
}


# ────────────────────────────────────────────────────────────────
# HELPER FUNCTIONS
# ────────────────────────────────────────────────────────────────

def get_task_endpoint(action: str) -> str:
    """Get full endpoint path for a task action"""
    return TASK_PREFIX + TASK_ROUTES.get(action, "")
