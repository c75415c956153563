"""
Pydantic schema definitions for API payloads.

Schemas describe request and response bodies and are shared by the
service layer and the HTTP routers.
"""
