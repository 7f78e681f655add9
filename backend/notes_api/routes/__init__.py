# Routes package init
"""
Notes API: API Routes Package
===============================

What:  HTTP route handlers that accept requests and return responses.

Route Inventory:
    - notes.py:   POST   /api/notes            (create)
                  GET    /api/notes            (list, page/limit)
                  GET    /api/notes/{id}       (get one)
                  PATCH  /api/notes/{id}       (partial update)
                  DELETE /api/notes/{id}       (delete)
    - health.py:  GET    /api/healthchecker    (static liveness)
                  GET    /health               (readiness, probes the database)

Routes stay thin: extract path/query/body, call NoteService, wrap the
result in the success envelope. Failures are raised as exceptions and
rendered by the handlers registered in main.py.
"""
