"""
Route handlers for generation history and stored data.
"""
from fastapi import APIRouter, HTTPException
from services.history import GenerationHistory, clear_data, export_data
from utils.constants import HistoryKind

router = APIRouter()


def _history(kind: str) -> GenerationHistory:
    if kind not in HistoryKind.KEYS:
        raise HTTPException(status_code=404, detail=f"Unknown history type '{kind}'")
    return GenerationHistory(kind)


@router.get("/history/{kind}")
async def list_history(kind: str):
    return {"kind": kind, "items": _history(kind).entries()}


@router.delete("/history/{kind}")
async def clear_history(kind: str):
    _history(kind).clear()
    return {"kind": kind, "cleared": True}


@router.delete("/history/{kind}/{index}")
async def delete_history_item(kind: str, index: int):
    if not _history(kind).delete(index):
        raise HTTPException(status_code=404, detail=f"No {kind} history item at index {index}")
    return {"kind": kind, "deleted": index}


@router.get("/data/export")
async def export_app_data():
    """Dump every stored history list and conversation."""
    return export_data()


@router.delete("/data")
async def clear_app_data():
    return {"cleared": clear_data()}
