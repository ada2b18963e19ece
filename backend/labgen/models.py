from __future__ import annotations
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Integer, Text
from .db import Base


class AllocationHistory(Base):
	__tablename__ = "allocation_history"
	id = Column(String(64), primary_key=True)
	generated_at = Column(DateTime, nullable=False, index=True)
	subject = Column(String(256), nullable=False)
	topic = Column(String(256), default="", nullable=False)
	difficulty = Column(String(16), nullable=False)
	mode = Column(String(16), nullable=False)
	total_students = Column(Integer, nullable=False)
	questions_per_student = Column(Integer, nullable=False)
	students_assigned = Column(Text, nullable=True)  # JSON string snapshot
	created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
