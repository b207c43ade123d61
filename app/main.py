import logging

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api import leaderboard, movies
from app.core.config import settings
from app.core.db import dispose_engine, init_models


logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


app = FastAPI(
    title="Movies Backend",
    version="0.1.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(movies.router)
app.include_router(leaderboard.router)


@app.get("/")
async def root():
    return {"message": "Hello, Movies!"}


@app.on_event("startup")
async def startup():
    await init_models()


@app.on_event("shutdown")
async def shutdown():
    await dispose_engine()


def run():
    logger.info("Server is running on port %d", settings.PORT)
    uvicorn.run("app.main:app", host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
