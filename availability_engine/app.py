"""
ASGI entry point for the Availability API.

Re-exports the FastAPI app from availability_engine/api/main.py for
`uvicorn availability_engine.app:app`.
"""

from availability_engine.api.main import app

__all__ = ["app"]
