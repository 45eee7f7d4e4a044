"""
API Layer - FastAPI Presentation Layer

Responsibility:
    HTTP interface for the matching service. Handles requests and responses,
    maps domain errors to HTTP status codes. No business logic.

Contains:
    - FastAPI routers (swipes, users, pairs)
    - Request/Response models (Pydantic)
    - Dependency injection setup (dependencies.py)
    - Middleware configuration (CORS, logging)
"""
