# Middleware package init
"""
Notes API: Middleware Package
===============================

What:  Cross-cutting concerns applied to every request.

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → [CORS] → Route Handler

    1. Request ID: assigns the correlation ID used by every log line
    2. Logging: one access line per request with status and duration
    3. CORS: FastAPI's CORSMiddleware (handles preflight)

    Responses travel the chain in reverse, so the request ID header is
    present on every response, including CORS preflights and errors.
"""
