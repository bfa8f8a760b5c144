"""
Book Service Package

Library catalog microservice: books and per-book stock, with mutations
gated by permissions granted by the user service.

Package Structure:
- config.py: Configuration using Pydantic Settings
- errors.py: Error kinds and the exceptions that carry them
- permissions.py: Capability bitmask and the permission gate contract
- database.py: SQLAlchemy engine and session factory
- main.py: FastAPI application factory
- dependencies.py: Dependency injection functions
- schemas/: Book and Stock records (Pydantic)
- models/: SQLAlchemy tables for the SQL backend
- store/: Storage contracts and the memory/SQL backends
- services/: Book and stock services, user service client
- routers/: API route handlers
- utils/: Reader/writer lock
"""

__version__ = "0.1.0"
