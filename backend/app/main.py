import logging
import os
import subprocess
from datetime import datetime

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.database import init_db
from app.routes import fixtures, pairings, results, selections, standings

logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())
logger = logging.getLogger(__name__)

app = FastAPI(title="Team Championship API")


# Get build info
def get_build_info():
    """Get git commit hash or build timestamp"""
    try:
        result = subprocess.run(
            ["git", "rev-parse", "--short", "HEAD"],
            cwd=os.path.dirname(os.path.dirname(__file__)),
            capture_output=True,
            text=True,
            timeout=2,
        )
        if result.returncode == 0:
            return result.stdout.strip()
    except (OSError, subprocess.SubprocessError):
        logger.debug("git not available, using build timestamp")

    # Fallback to build timestamp
    return datetime.now().strftime("%Y%m%d-%H%M%S")


BUILD_HASH = get_build_info()

_cors_origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]
_extra = os.getenv("CORS_ORIGINS", "")
if _extra:
    _cors_origins.extend(o.strip() for o in _extra.split(",") if o.strip())

app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(fixtures.router, prefix="/api", tags=["fixtures"])
app.include_router(pairings.router, prefix="/api", tags=["pairings"])
app.include_router(selections.router, prefix="/api", tags=["selections"])
app.include_router(results.router, prefix="/api", tags=["results"])
app.include_router(standings.router, prefix="/api", tags=["standings"])


@app.on_event("startup")
def on_startup():
    init_db()  # Imports models and creates tables

    route_count = 0
    for r in app.routes:
        methods = getattr(r, "methods", None)
        path = getattr(r, "path", None)
        if path:
            logger.debug("%-20s %s", ", ".join(sorted(methods)) if methods else "N/A", path)
            route_count += 1
    logger.info("Registered %d routes, build %s", route_count, BUILD_HASH)


@app.get("/api/health")
def health_check():
    """Diagnostic endpoint to verify which code is running"""
    return {"app_name": "Team Championship API", "build_hash": BUILD_HASH, "status": "healthy"}


@app.get("/")
def root():
    return {"message": "Team Championship API"}
