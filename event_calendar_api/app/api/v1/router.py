"""
Top‑level router for version 1 of the API.

This router aggregates domain‑specific routers (calendars, entries,
views, gestures) under a unified prefix.  When new endpoints are added
or when new domains are introduced, update this file to include their
routers.
"""

from fastapi import APIRouter

from .endpoints import calendars, entries, gestures, info, views

router = APIRouter()

router.include_router(calendars.router, prefix="/calendars", tags=["calendars"])
router.include_router(entries.router, prefix="/entries", tags=["entries"])
router.include_router(views.router, prefix="/views", tags=["views"])
router.include_router(gestures.router, prefix="/gestures", tags=["gestures"])
router.include_router(info.router, prefix="/info", tags=["info"])
