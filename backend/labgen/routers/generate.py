from __future__ import annotations
import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ..errors import FallbackFailure, ValidationError
from ..generation_client import GenerationClient, get_generation_client
from ..history import HistorySink, get_history_sink
from ..schemas import GenerationRequest
from ..service import AllocationService
from ..settings import settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["generation"])


def get_allocation_service(
	client: GenerationClient = Depends(get_generation_client),
	history: HistorySink = Depends(get_history_sink),
) -> AllocationService:
	return AllocationService(client, history, retries=settings.generation_retries)


def failure_response(details: str) -> JSONResponse:
	return JSONResponse(
		status_code=500,
		content={"success": False, "error": "Failed to generate questions", "details": details},
	)


@router.post("/generate-questions")
async def generate_questions(req: GenerationRequest, service: AllocationService = Depends(get_allocation_service)):
	try:
		result = await service.generate_allocations(req)
	except ValidationError as e:
		return JSONResponse(status_code=400, content={"error": str(e)})
	except FallbackFailure as e:
		return failure_response(str(e))
	except Exception as e:
		logger.exception("Question generation error")
		return failure_response(str(e) or e.__class__.__name__)
	return result.to_response()
