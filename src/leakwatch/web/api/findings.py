"""REST API for stored findings and their lifecycle."""

from __future__ import annotations

from fastapi import APIRouter, Query, Request

from leakwatch.scanner.models import Finding, FindingStatus

router = APIRouter(tags=["findings"])


def _response(finding: Finding) -> dict:
    data = finding.to_dict()
    data["context_lines"] = finding.context.split("\n")
    return data


@router.get("/findings")
def list_findings(
    request: Request,
    severity: str | None = None,
    finding_type: str | None = Query(None, alias="type"),
    status: str | None = None,
    file: str | None = None,
    min_confidence: float | None = None,
):
    filters = {
        key: value
        for key, value in (
            ("severity", severity),
            ("type", finding_type),
            ("status", status),
            ("file", file),
            ("min_confidence", min_confidence),
        )
        if value is not None
    }
    return [_response(f) for f in request.app.state.store.query(filters)]


@router.get("/findings/{finding_id}")
def get_finding(finding_id: str, request: Request):
    return _response(request.app.state.store.get(finding_id))


@router.post("/findings/{finding_id}/resolve")
def resolve_finding(finding_id: str, request: Request):
    request.app.state.store.update_status(finding_id, FindingStatus.RESOLVED)
    return {"status": "resolved", "id": finding_id}


@router.post("/findings/{finding_id}/ignore")
def ignore_finding(finding_id: str, request: Request):
    request.app.state.store.update_status(finding_id, FindingStatus.IGNORED)
    return {"status": "ignored", "id": finding_id}


@router.delete("/findings/{finding_id}")
def delete_finding(finding_id: str, request: Request):
    request.app.state.store.delete(finding_id)
    return {"status": "deleted", "id": finding_id}


@router.get("/stats")
def get_stats(request: Request):
    return request.app.state.store.stats().to_dict()
