"""
Resource modules live under this package.

Each module owns its model, repository, service, payload schemas and routes,
and reuses the platform primitives (DB session, errors, validation).
"""
