"""Data stores for persistence, caching and object storage.

Stores handle:
- PostgreSQL: DB session lifecycle, table gateway
- Redis: page payload cache and revalidation
- Storage: bucket uploads and deletes

No business logic in stores - that belongs in services.
"""
