"""
API package.

This package hosts the FastAPI routers of the Blog Generator service and the exception handlers
that render framework-level errors in the service's JSON envelope:

- blog: POST /api/v1/blog/generate
- health: GET /health (liveness) and GET /ready (upstream readiness)
- errors: handlers for unmatched routes and unparseable request bodies

Routers are imported directly by the application factory in main.py, which also owns middleware
and dependency wiring.
"""
