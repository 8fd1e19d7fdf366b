"""
Application package initializer.

The project is organised into logical pieces: the pure scheduling
core lives in ``calendar`` (time utilities, layout, geometry, gesture
state machine and renderers), persistence and settings in ``core``,
data access in ``services`` and the HTTP surface in
``api/v1/endpoints``.  Versioning is handled by grouping routers under
the ``api/<version>/`` hierarchy.
"""

from .main import app  # noqa: F401
