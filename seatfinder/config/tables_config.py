"""
Table Registry
Static catalog of the tables the admin table browser and SQL runner may touch.
Editable tables expose insert/edit/delete; the rest are browse-only.
"""

from typing import Dict, List, Optional

# Role names that count as administrators
ADMIN_ROLES = ("admin", "super_admin")

# Columns managed by the database, never written through forms
SYSTEM_COLUMNS = ("id", "created_at", "updated_at")

TABLES = {
    "students": {
        "label": "students",
        "editable": True,
        "icon": "book-open",
        "color": "blue",
        "default_order": "created_at",
    },
    "teachers": {
        "label": "teachers",
        "editable": True,
        "icon": "users",
        "color": "purple",
        "default_order": "created_at",
    },
    "search_logs": {
        "label": "search_logs",
        "editable": False,
        "icon": "search",
        "color": "amber",
        "default_order": "created_at",
    },
    "activity_logs": {
        "label": "activity_logs",
        "editable": False,
        "icon": "activity",
        "color": "green",
        "default_order": "created_at",
    },
    "site_settings": {
        "label": "site_settings",
        "editable": True,
        "icon": "settings",
        "color": "slate",
        "default_order": "created_at",
    },
    "incidents": {
        "label": "incidents",
        "editable": True,
        "icon": "alert-circle",
        "color": "red",
        "default_order": "started_at",
    },
    "keep_alive_log": {
        "label": "keep_alive_log",
        "editable": False,
        "icon": "database",
        "color": "cyan",
        "default_order": "pinged_at",
    },
    "user_roles": {
        "label": "user_roles",
        "editable": False,
        "icon": "file-text",
        "color": "pink",
        "default_order": "created_at",
    },
}


def get_table_descriptor(name: str) -> Optional[Dict]:
    """Return the descriptor for a known table (with its name), or None."""
    config = TABLES.get(name)
    if config is None:
        return None
    return {"name": name, **config}


def is_known_table(name: str) -> bool:
    return name in TABLES


def is_editable(name: str) -> bool:
    config = TABLES.get(name)
    return bool(config and config["editable"])


def list_table_descriptors() -> List[Dict]:
    return [{"name": name, **config} for name, config in TABLES.items()]
