"""REST API for running scans."""

from __future__ import annotations

from pathlib import Path

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from leakwatch.repo.base import ScanMode
from leakwatch.rules.models import Severity
from leakwatch.scanner.models import ScanOptions

router = APIRouter(tags=["scans"])


class ScanRequest(BaseModel):
    path: str = "."
    scan_mode: ScanMode | None = None
    include_history: bool = False
    max_depth: int = 100
    severity: list[Severity] = Field(default_factory=list)
    include: list[str] = Field(default_factory=list)
    exclude: list[str] = Field(default_factory=list)
    respect_gitignore: bool = True


@router.post("/scans")
def run_scan(body: ScanRequest, request: Request):
    target = Path(body.path).resolve()
    if not target.exists():
        return JSONResponse(
            status_code=400,
            content={"detail": f"Path does not exist: {body.path}"},
        )

    options = ScanOptions(
        paths=[str(target)],
        scan_mode=body.scan_mode,
        include_history=body.include_history,
        max_depth=body.max_depth,
        file_patterns=body.include,
        exclude_patterns=body.exclude,
        respect_gitignore=body.respect_gitignore,
    )
    result = request.app.state.engine.scan(options)

    if body.severity:
        wanted = set(body.severity)
        result.findings = [f for f in result.findings if f.severity in wanted]

    data = result.to_dict()
    data["summary"] = _summary(result.findings)
    return data


def _summary(findings) -> dict:
    by_severity: dict[str, int] = {}
    by_type: dict[str, int] = {}
    for f in findings:
        by_severity[f.severity.value] = by_severity.get(f.severity.value, 0) + 1
        by_type[f.type] = by_type.get(f.type, 0) + 1
    return {
        "total_findings": len(findings),
        "findings_by_severity": by_severity,
        "findings_by_type": by_type,
    }
