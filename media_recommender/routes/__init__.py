"""
FastAPI routers for all API endpoints.

Each module defines a router for one area (auth, recommendations, health).
Flow per endpoint: auth dependency, Pydantic validation, service call,
mapping of service errors to HTTPException.
"""
