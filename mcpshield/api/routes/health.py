"""
Health Check Route — GET /health
"""

from __future__ import annotations

from fastapi import APIRouter

from mcpshield.config import SCANNER_VERSION, settings
from mcpshield.core.rule_catalog import RULE_REGISTRY

router = APIRouter()


@router.get("/health")
async def health():
    """Health check endpoint."""
    return {
        "status": "ok",
        "version": SCANNER_VERSION,
        "modules": settings.default_modules,
        "rules": len(RULE_REGISTRY),
    }
