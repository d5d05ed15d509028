"""
FastAPI/ASGI application entrypoint.

Run with: uvicorn reputeos_lsi.api_server.app:app --host 0.0.0.0 --port 8000
"""

from reputeos_lsi.api_server.server import app

__all__ = ["app"]
