"""Helpers for ``/{tenant_code}/{project_code}/...`` paths."""

from __future__ import annotations

from typing import Optional


def build_path(path: str, tenant_code: Optional[str], project_code: Optional[str]) -> str:
    """Prefix ``path`` with tenant/project codes (e.g. "/lobby" -> "/fms/p1/lobby").

    A prefix that is already present is not duplicated. Without both codes the
    path is returned unchanged.
    """

    if not tenant_code or not project_code:
        return path

    clean = path[1:] if path.startswith("/") else path
    full_prefix = f"{tenant_code}/{project_code}/"
    if clean.startswith(full_prefix):
        clean = clean[len(full_prefix):]
    elif clean.startswith(f"{tenant_code}/"):
        clean = clean[len(tenant_code) + 1:]

    return f"/{tenant_code}/{project_code}/{clean}"


def split_tenant_project(pathname: str) -> tuple[Optional[str], Optional[str]]:
    segments = [s for s in pathname.split("/") if s]
    tenant_code = segments[0] if len(segments) > 0 else None
    project_code = segments[1] if len(segments) > 1 else None
    return tenant_code, project_code

