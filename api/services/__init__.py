"""Service layer for redirect logic.

Services hold the business rules (slug derivation, the video lookup table
and redirect decisions), keeping routes and middleware thin and focused on
HTTP handling.

Layer hierarchy:
    Middleware/Routes (HTTP) -> Services (Business Logic) -> videos.json

Services should NOT know about HTTP request/response details beyond
returning a redirect decision.
"""
