"""
Alert Prioritization Engine Package.

Scores, routes, schedules and clusters competitive-intelligence alerts handed in
by an upstream collector. The package performs no I/O: every operation is a
synchronous transform over in-memory models.

Subpackages:
    - core: Settings and the error taxonomy
    - models: Pydantic schemas and enums
    - services: Scoring, business context, routing, scheduling, clustering and
      the engine that composes them
    - jobs: Batch digest rendering for the chat transport
"""

__version__ = "1.0.0"
