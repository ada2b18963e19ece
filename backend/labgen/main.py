import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .db import Base, engine
from .settings import settings
from .routers import health, generate
from .routers import history

logging.basicConfig(level=settings.log_level.upper(), format="[%(asctime)s] %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)

app = FastAPI(title="Lab Task Generator API")
app.include_router(health.router)
app.include_router(generate.router)
app.include_router(history.router)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
	# Keep malformed bodies on the same 400 {"error": ...} shape as bound violations
	errors = exc.errors()
	if errors:
		first = errors[0]
		field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
		message = f"{field}: {first.get('msg')}" if field else str(first.get("msg"))
	else:
		message = "Invalid input parameters"
	return JSONResponse(status_code=400, content={"error": message})


@app.get("/info")
def root():
	provider = settings.llm_provider
	key = settings.openai_api_key if provider == "openai" else settings.gemini_api_key
	return {"status": "ok", "provider": provider, "llm_configured": bool(key)}


@app.on_event("startup")
async def startup_event():
	# Initialize DB schema for the history archive
	try:
		Base.metadata.create_all(bind=engine)
	except Exception:
		logger.warning("Could not initialize history tables", exc_info=True)
