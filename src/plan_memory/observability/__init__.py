"""
plan_memory.observability

Observability package.

Responsibilities:
- Structured logging configuration.
- Agent context propagation for consistent log enrichment.
"""

# Package marker.
