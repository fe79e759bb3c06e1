"""
Core utilities shared across the recovery API.

This package hosts configuration helpers (env vars, storage selection),
logging setup and password hashing. Routers and repositories should depend on
these primitives instead of reading os.environ directly.
"""
