"""
Application package initializer.

The service is split into small pieces: ``core`` holds settings and
logging setup, ``schemas`` the Pydantic models that describe issues on
the wire, ``services`` the in-memory issue store, and ``api`` the
routers that expose the store over HTTP.
"""

from .main import app  # noqa: F401
