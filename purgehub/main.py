"""FastAPI application entrypoint for the admin console API. Only wiring and middleware."""

from dotenv import load_dotenv

load_dotenv()

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from purgehub.api.v1 import router as v1_router
from purgehub.core.config import settings
from purgehub.services.errors import ModerationError

app = FastAPI(
    title="Purge Hub Moderation API",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.APP_ENV == "dev" else [],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ModerationError)
async def moderation_error_handler(request: Request, exc: ModerationError) -> JSONResponse:
    """Service refusals become {"detail": message} with the error's status code."""
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


app.include_router(v1_router, prefix=settings.API_V1_PREFIX)


@app.get("/")
def root() -> dict[str, str]:
    """Root route; minimal payload for discovery."""
    return {"message": "Purge Hub Moderation API"}
