"""
mcpshield Configuration — pydantic-settings based.

All settings are read from environment variables or .env file.
Nothing is required; every value has a working default.
"""

from pydantic_settings import BaseSettings
from pydantic import Field


SCANNER_VERSION = "1.0.0"


class Settings(BaseSettings):
    """Application-wide settings sourced from environment variables."""

    # ── Discovery ──
    source_extensions: list[str] = Field(
        default=[".js", ".ts", ".mjs", ".cjs", ".jsx", ".tsx"],
        description="File extensions treated as server source code",
    )
    excluded_dirs: list[str] = Field(
        default=["node_modules", ".git", "dist", "build", "coverage", ".next"],
        description="Directory names never descended into",
    )
    manifest_candidates: list[str] = Field(
        default=["server.json", "mcp.json", "manifest.json", ".mcp/config.json"],
        description="Ordered manifest locations, relative to the target root",
    )
    package_file: str = Field(
        default="package.json", description="Package metadata file name"
    )

    # ── Detection ──
    evidence_max_length: int = Field(
        default=120, description="Max characters of source kept as evidence"
    )
    default_modules: list[str] = Field(
        default=["static", "deps", "perms", "meta"],
        description="Modules run when a scan does not select any",
    )

    # ── External dependency audit ──
    npm_executable: str = Field(default="npm", description="npm binary to invoke")
    npm_audit_timeout: float = Field(
        default=60.0, description="Timeout for `npm audit --json` in seconds"
    )
    npm_audit_max_bytes: int = Field(
        default=10 * 1024 * 1024, description="Output cap for `npm audit --json`"
    )
    npm_outdated_timeout: float = Field(
        default=30.0, description="Timeout for `npm outdated --json` in seconds"
    )
    npm_outdated_max_bytes: int = Field(
        default=5 * 1024 * 1024, description="Output cap for `npm outdated --json`"
    )

    # ── Server ──
    port: int = Field(default=5001, description="Server port")
    host: str = Field(default="0.0.0.0", description="Server bind host")
    cors_origins: list[str] = Field(
        default=["*"], description="Allowed CORS origins"
    )
    log_level: str = Field(default="INFO", description="Root log level")

    # ── Audit ──
    audit_log_enabled: bool = Field(
        default=True, description="Append a record per scan to the audit log"
    )
    audit_log_path: str = Field(
        default="audit.jsonl", description="Path to JSON-lines audit log file"
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


# Singleton instance, imported by other modules
settings = Settings()
