from fastapi import APIRouter, Depends

from ..history import SqlHistorySink, get_history_sink

router = APIRouter(prefix="/api/allocation-history", tags=["history"])


@router.get("")
def list_history(history: SqlHistorySink = Depends(get_history_sink)):
	return [r.to_dict() for r in history.list()]


@router.delete("")
def clear_history(history: SqlHistorySink = Depends(get_history_sink)):
	removed = history.clear()
	return {"ok": True, "removed": removed}
