from contextlib import asynccontextmanager

from fastapi import FastAPI

from stylist.core.config import settings
from stylist.core.logging import configure_logging
from stylist.api.v1 import api_v1
from stylist.db.session import dispose_engine


configure_logging(settings.LOG_LEVEL)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    yield
    dispose_engine()


app = FastAPI(title=settings.PROJECT_NAME, lifespan=lifespan)

app.include_router(api_v1, prefix=settings.API_PREFIX)


# root probe (Docker health check)
@app.get("/")
def root():
    return {
        "app": settings.PROJECT_NAME,
        "env": settings.ENVIRONMENT,
        "ok": True
    }
