"""API router for v1 endpoints."""

from fastapi import APIRouter

from qareport.api import comments, images, profile, reports, revisions, share

router = APIRouter()

# Current user
router.include_router(profile.router, tags=["profile"])

# Report CRUD, checklist wizard, completion and export
router.include_router(reports.router, tags=["reports"])

# Audit trail and collaboration
router.include_router(revisions.router, tags=["revisions"])
router.include_router(comments.router, tags=["comments"])

# Issue images
router.include_router(images.router, tags=["images"])

# Share links (public view needs no auth)
router.include_router(share.router, tags=["share"])
