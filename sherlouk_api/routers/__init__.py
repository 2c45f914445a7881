"""
FastAPI routers grouped by resource (auth, users, tables, audit, frontend).

Each module exposes an APIRouter included by the application factory in
app.py. Routers read their collaborators (repositories, authenticator,
settings) from ``request.app.state`` and hold no state between requests.
"""
