"""Liveness route."""

from fastapi import APIRouter

router = APIRouter()


@router.get("/health")
def health() -> dict:
    """Health check endpoint. Does not touch the database."""
    return {"status": "ok"}
