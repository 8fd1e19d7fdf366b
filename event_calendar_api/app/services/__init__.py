"""
Service layer abstraction.

Each service encapsulates data access and business logic for a
domain.  API handlers call services; services call the sqlite layer
in ``core.db`` and the pure scheduling core in ``calendar``.
"""
