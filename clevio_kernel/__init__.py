"""
CLEVIO Kernel

Domain types, typed exceptions, structured logging and persistence
plumbing for the eligibility & scheduling engine:
- Immutable client, booking and compliance snapshots
- Injectable clock for deterministic date math
- Typed, coded exceptions
- SQLAlchemy models for the reference persistence collaborator
"""

__version__ = "0.1.0"
