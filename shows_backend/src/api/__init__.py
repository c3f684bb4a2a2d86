"""
FastAPI Shows Backend package.

The application instance lives in `src.api.main`; it is not imported here so
that importing helpers (settings, schemas) has no database side effects.
"""
