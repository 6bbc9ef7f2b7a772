"""
plan_memory.db.repositories

Repository package.

Responsibilities:
- Group agent-scoped data-access repositories for plans and tasks.
"""

# Package marker; repositories are imported directly from submodules.


# --- Module Notes -----------------------------------------------------------
# Repositories flush but never commit; transaction boundaries belong to services.
