"""
Startup sanity checks (fail-fast).

Lightweight checks run during the FastAPI lifespan, before the schema catalog
is built: listing/paging settings and a round trip to the target database.
"""
