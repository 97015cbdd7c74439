"""Database infrastructure for the reference persistence collaborator."""

from clevio_kernel.db.base import Base, TrackedBase
from clevio_kernel.db.engine import (
    create_tables,
    drop_tables,
    get_engine,
    get_session,
    get_session_factory,
    init_engine_from_url,
    reset_engine,
    session_scope,
)
