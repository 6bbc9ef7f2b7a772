"""
plan_memory.services

Service layer (transaction owners).

Responsibilities:
- Compose repository calls into the public operation surface.
- Own commit/rollback boundaries and error logging.
"""

# Package marker.
