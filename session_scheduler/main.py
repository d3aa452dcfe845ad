# session_scheduler/main.py
from contextlib import asynccontextmanager

from fastapi import FastAPI

from session_scheduler.config import get_settings
from session_scheduler.logging_config import configure_logging
from session_scheduler.routers import attendance, conflicts, copy_votes, tallies

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.LOG_LEVEL)
    yield


app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

# Routers
app.include_router(conflicts.router)
app.include_router(tallies.router)
app.include_router(attendance.router)
app.include_router(copy_votes.router)


@app.get("/health")
def health_check():
    return {
        "status": "ok",
        "app": settings.APP_NAME,
        "env": settings.ENV,
    }
