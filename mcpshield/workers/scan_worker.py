"""
Scan Worker — Async orchestrator running the full inspection pipeline.

Pipeline:
1. Discover source files, manifest and package.json (concurrently)
2. Freeze them into a read-only ScanContext
3. Fan out the selected modules (static, deps, perms, meta) concurrently
4. Isolate each module's failure into an error record
5. Fan in: merge, sort, score
6. Assemble the Report
"""

from __future__ import annotations

import asyncio
import logging
import time
import uuid
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone
from pathlib import Path

from mcpshield.collectors.discovery import (
    discover_files,
    find_manifest,
    find_package_metadata,
)
from mcpshield.collectors.npm import NpmRunner
from mcpshield.config import SCANNER_VERSION, settings
from mcpshield.core.aggregator import aggregate
from mcpshield.core.capability_auditor import audit_capabilities
from mcpshield.core.dependency_auditor import audit_dependencies
from mcpshield.core.detection_engine import DetectionEngine
from mcpshield.core.metadata_auditor import audit_metadata
from mcpshield.models.context_models import ScanContext
from mcpshield.models.finding_models import ModuleResult
from mcpshield.models.report_models import Report, TargetSummary

logger = logging.getLogger("mcpshield.worker")

MODULE_ORDER = ["static", "deps", "perms", "meta"]


class ScanWorker:
    """Async scan orchestrator: gathers inputs, fans out modules, fans in."""

    def __init__(
        self,
        npm_runner: NpmRunner | None = None,
        detection_engine: DetectionEngine | None = None,
    ) -> None:
        self.npm_runner = npm_runner or NpmRunner()
        self.detection_engine = detection_engine or DetectionEngine()

    async def build_context(self, target_path: str | Path) -> ScanContext:
        """
        Gather collaborator inputs into an immutable snapshot.

        Raises:
            ScanTargetError: If the target root cannot be read.
        """
        root = str(Path(target_path).resolve())
        files, manifest, package = await asyncio.gather(
            asyncio.to_thread(discover_files, root),
            asyncio.to_thread(find_manifest, root),
            asyncio.to_thread(find_package_metadata, root),
        )
        return ScanContext(
            target_path=root,
            files=tuple(files),
            manifest=manifest,
            package=package,
        )

    async def run_scan(
        self,
        target_path: str | Path,
        modules: list[str] | None = None,
    ) -> Report:
        """
        Execute the full pipeline against a directory.

        Args:
            target_path: Root directory of the MCP server.
            modules: Module tags to run; defaults to settings.default_modules.

        Returns:
            The assembled Report.

        Raises:
            ScanTargetError: Whole-run failure, no report is produced.
        """
        scan_id = uuid.uuid4().hex[:8]
        start_time = time.monotonic()
        selected = [m for m in MODULE_ORDER if m in (modules or settings.default_modules)]

        logger.info(f"[{scan_id}] Starting scan of {target_path} (modules: {','.join(selected)})")

        # ── Step 1–2: Discovery ──
        context = await self.build_context(target_path)
        logger.info(
            f"[{scan_id}] Found {len(context.files)} source files, "
            f"manifest={'yes' if context.manifest else 'no'}, "
            f"package.json={'yes' if context.package else 'no'}"
        )

        # ── Step 3–4: Fan out ──
        tasks: list[Awaitable[ModuleResult]] = []
        for tag in selected:
            if tag == "deps" and context.package is None:
                logger.info(f"[{scan_id}] Skipping deps: no package metadata")
                continue
            tasks.append(_isolated(scan_id, tag, self._module_fn(tag), context))

        results = await asyncio.gather(*tasks)

        # ── Step 5: Fan in ──
        merged = aggregate(list(results), known_modules=selected)

        # ── Assemble report ──
        elapsed_ms = (time.monotonic() - start_time) * 1000
        report = Report(
            scan_id=scan_id,
            timestamp=datetime.now(timezone.utc),
            scanner_version=SCANNER_VERSION,
            target=_target_summary(context),
            summary=merged.summary,
            modules=merged.modules,
            findings=merged.findings,
            errors=merged.errors,
            duration_ms=round(elapsed_ms, 2),
        )

        logger.info(
            f"[{scan_id}] Scan complete in {elapsed_ms:.0f}ms: "
            f"{report.summary.total_findings} findings, "
            f"score={report.summary.risk_score} ({report.summary.risk_level}), "
            f"errors={len(report.errors)}"
        )
        return report

    def _module_fn(self, tag: str) -> Callable[[ScanContext], Awaitable[ModuleResult]]:
        if tag == "static":
            return lambda ctx: asyncio.to_thread(self.detection_engine.run, ctx)
        if tag == "perms":
            return lambda ctx: asyncio.to_thread(audit_capabilities, ctx)
        if tag == "meta":
            return lambda ctx: asyncio.to_thread(audit_metadata, ctx)
        if tag == "deps":
            return lambda ctx: audit_dependencies(ctx, self.npm_runner)
        raise ValueError(f"Unknown module: {tag}")


async def _isolated(
    scan_id: str,
    tag: str,
    module_fn: Callable[[ScanContext], Awaitable[ModuleResult]],
    context: ScanContext,
) -> ModuleResult:
    """Run one module; any exception becomes its error record."""
    try:
        return await module_fn(context)
    except Exception as e:
        logger.warning(f"[{scan_id}] Module '{tag}' failed: {e}")
        return ModuleResult(module=tag, findings=[], error=str(e) or type(e).__name__)


def _target_summary(context: ScanContext) -> TargetSummary:
    package = context.package
    manifest = context.manifest
    return TargetSummary(
        path=context.target_path,
        server_name=(package and package.name) or (manifest and manifest.name) or "unknown",
        server_version=(package and package.version) or (manifest and manifest.version) or "unknown",
        files_scanned=len(context.files),
    )
