"""
Top‑level package for the Event Calendar API.

This file makes ``event_calendar_api`` a Python package so that
modules within ``app`` can be imported using fully qualified names
like ``event_calendar_api.app.main``.

The package provides no public exports; all functionality lives in
submodules under ``app``.
"""

__all__ = []
