from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from cinemood.core.config import settings
from cinemood.core.exceptions import CineMoodError
from cinemood.utils.logger import logger

from cinemood.api import details, mood_match, movies, search


app = FastAPI(title="CineMood API", version="1.0.0")

# Add GZip compression middleware for better transfer performance
app.add_middleware(GZipMiddleware, minimum_size=1000)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(mood_match.router, prefix="/api", tags=["Mood Match"])
app.include_router(movies.router, prefix="/api", tags=["Listings"])
app.include_router(search.router, prefix="/api", tags=["Search"])
app.include_router(details.router, prefix="/api", tags=["Details"])


@app.exception_handler(CineMoodError)
async def cinemood_error_handler(request: Request, exc: CineMoodError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message} ({exc.details or 'no details'})")
    else:
        logger.warning(f"{request.method} {request.url.path} rejected: {exc.message} ({exc.details or 'no details'})")
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    problems = "; ".join(
        f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg')}" for err in exc.errors()
    )
    logger.warning(f"{request.method} {request.url.path} invalid request: {problems}")
    return JSONResponse(status_code=400, content={"error": "Invalid request", "details": problems})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(f"{request.method} {request.url.path} crashed: {type(exc).__name__}", exc_info=exc)
    return JSONResponse(
        status_code=500, content={"error": "Internal server error", "details": type(exc).__name__}
    )


@app.get("/")
def root():
    return {"status": "CineMood API Running"}

@app.get("/health")
async def health_check():
    """Simple health check endpoint for load balancers/monitoring"""
    return {
        "status": "healthy",
        "tmdb_configured": bool(settings.tmdb_api_key),
        "mood_match_strategy": settings.mood_match_strategy,
    }
