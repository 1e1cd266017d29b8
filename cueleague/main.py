import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from cueleague.api.endpoints import auth as auth_endpoints
from cueleague.api.endpoints import tournaments as tournament_endpoints
from cueleague.api.endpoints import players as player_endpoints
from cueleague.api.endpoints import matches as match_endpoints
from cueleague.api.endpoints import ranking as ranking_endpoints
from cueleague.core.config import settings
from cueleague.core.database import check_connection, init_db
from cueleague.core.exceptions import LeagueError

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # An unreachable store is fatal: InternalStoreError aborts startup
    check_connection()
    init_db()
    logger.info("Database ready, serving requests")
    yield


app = FastAPI(title="Cue League API", lifespan=lifespan)


@app.exception_handler(LeagueError)
async def league_error_handler(request: Request, exc: LeagueError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


# Include routers
app.include_router(auth_endpoints.router, prefix="/auth", tags=["Authentication"])
app.include_router(tournament_endpoints.router, prefix="/tournaments", tags=["Tournaments"])
app.include_router(player_endpoints.router, prefix="/players", tags=["Players"])
app.include_router(match_endpoints.router, prefix="/matches", tags=["Matches"])
app.include_router(ranking_endpoints.router, prefix="/ranking", tags=["Ranking"])


@app.get("/")
async def root():
    return {"message": "Cue League API"}
