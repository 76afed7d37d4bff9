"""Aggregated status endpoints."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, HTTPException, Request

from statuswatch.api.snapshot import SnapshotCache
from statuswatch.status.models import ServiceCategory
from statuswatch.status.registry import ServiceRegistry

router = APIRouter(tags=["status"])


def _registry(request: Request) -> ServiceRegistry:
    return request.app.state.registry


def _snapshots(request: Request) -> SnapshotCache:
    return request.app.state.snapshots


@router.get("/status")
async def status(request: Request) -> Dict[str, Any]:
    snapshot = await _snapshots(request).get()
    return snapshot.to_dict()


@router.get("/summary")
async def summary(request: Request) -> Dict[str, Any]:
    snapshot = await _snapshots(request).get()
    return {"summary": snapshot.summary(), "lastUpdated": snapshot.generated_at.isoformat()}


@router.get("/services")
async def list_services(
    request: Request,
    search: str = "",
    category: Optional[str] = None,
) -> List[Dict[str, Any]]:
    selected: ServiceCategory | None = None
    if category is not None:
        try:
            selected = ServiceCategory(category)
        except ValueError:
            raise HTTPException(status_code=400, detail=f"Unknown category: {category}") from None

    snapshot = await _snapshots(request).get()
    return [
        {
            "key": entry.key,
            "name": entry.name,
            "category": entry.category.value,
            "url": entry.url,
            "icon": entry.icon,
            "status": snapshot.get(entry.key).value,
        }
        for entry in _registry(request).filter(search=search, category=selected)
    ]
