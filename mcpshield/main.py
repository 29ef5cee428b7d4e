"""
mcpshield FastAPI Application — Static security inspection of MCP servers.

  POST /scan          → scan a server directory, ranked findings + risk score
  GET  /scans/recent  → audit trail of past scans
  GET  /health        → {"status": "ok", ...}
"""

from __future__ import annotations

import logging

from dotenv import load_dotenv
load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from mcpshield.api.routes.health import router as health_router
from mcpshield.api.routes.scan import router as scan_router
from mcpshield.config import SCANNER_VERSION, settings

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("mcpshield")

app = FastAPI(
    title="mcpshield",
    description="Offline security scanner for MCP (Model Context Protocol) servers",
    version=SCANNER_VERSION,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(scan_router)
app.include_router(health_router)
