"""
Availability Engine API module.

Provides FastAPI HTTP endpoints for availability and meetings.
"""

from availability_engine.api.main import app, run_server

__all__ = ["app", "run_server"]
