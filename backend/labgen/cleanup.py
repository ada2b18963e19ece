from __future__ import annotations
from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from .models import AllocationHistory


def trim_history(db: Session, keep: int) -> int:
	# Keep only the newest `keep` rows; ties on generated_at fall back to insertion time
	newest = (
		select(AllocationHistory.id)
		.order_by(AllocationHistory.generated_at.desc(), AllocationHistory.created_at.desc())
		.limit(max(keep, 0))
	)
	keep_ids = set(db.execute(newest).scalars().all())
	res = db.execute(delete(AllocationHistory).where(AllocationHistory.id.not_in(keep_ids)))
	db.commit()
	return res.rowcount or 0


def clear_history(db: Session) -> int:
	res = db.execute(delete(AllocationHistory))
	db.commit()
	return res.rowcount or 0
