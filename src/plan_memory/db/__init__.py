"""
plan_memory.db

Persistence package (SQLAlchemy async over SQLite).

Responsibilities:
- Provide ORM models, the shared database resource, and repositories.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Nothing outside this package builds SQL; services only talk to repositories.
