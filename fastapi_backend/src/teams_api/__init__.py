"""
Team roster API package.

Modules:
- config: environment settings
- db: PostgreSQL connection pooling + query helpers
- errors: error taxonomy mapped to HTTP statuses
- auth_utils: password hashing and JWT helpers
- credentials: login checks against the identity tables
- registrar: inserts for users, coaches, teams and players
- readers: coach and player lookups
- schemas: Pydantic models for the REST API
- main: FastAPI application and routes
"""
