import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from app.api import analytics, flashcards, health, interview, projects
from app.config import settings
from app.errors import AppError, BadRequestError
from app.logging_config import setup_logging
from app.models.database import init_db
from app.services.llm import llm_service

setup_logging()
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info("Interview Coach API started")
    yield
    await llm_service.client.aclose()

app = FastAPI(
    title="Interview Coach API",
    description="Backend API for AI-assisted mock interviews",
    version="1.0.0",
    lifespan=lifespan
)

# CORS middleware for frontend communication
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

def _error_response(exc: AppError) -> JSONResponse:
    error = {"code": exc.code, "message": exc.message}
    if settings.DEBUG and exc.details:
        error["details"] = exc.details
    return JSONResponse(status_code=exc.status_code, content={"success": False, "error": error})

@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return _error_response(exc)

@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    logger.info("%s %s rejected: invalid request", request.method, request.url.path)
    return _error_response(
        BadRequestError("Invalid request", details={"errors": jsonable_encoder(exc.errors())})
    )

# Include routers (analytics first so its paths win over /{interview_id})
app.include_router(health.router, prefix="/health", tags=["health"])
app.include_router(analytics.router, prefix="/api/interview", tags=["analytics"])
app.include_router(interview.router, prefix="/api/interview", tags=["interview"])
app.include_router(flashcards.router, prefix="/api/flashcards", tags=["flashcards"])
app.include_router(projects.router, prefix="/api/projects", tags=["projects"])

@app.get("/")
async def root():
    return {"message": "Interview Coach API is running!"}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.API_HOST, port=settings.API_PORT)
