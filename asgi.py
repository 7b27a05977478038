"""
asgi.py -- ASGI entry point for SessionGate.

Run with:  uvicorn asgi:app --reload
           uvicorn asgi:app --host 0.0.0.0 --port 3000
"""

from api.main import app

__all__ = ["app"]
