"""
Core utilities shared across the Sherlouk back-office API.

This package hosts configuration (env vars, paths), the error taxonomy,
logging setup and small helpers (ids, clocks). Repositories, services and
routers depend on these primitives instead of reading os.environ directly.
"""
