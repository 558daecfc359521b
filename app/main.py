import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.clients.postgres import create_pg_pool
from app.clients.settings import API_HOST, API_PORT, LOG_LEVEL
from app.exceptions.handlers import register_exception_handlers
from app.models.users import HealthResponse
from app.routers.users import router as user_router

logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.pg_pool = await create_pg_pool()
    logger.info("Database connection pool created")
    yield

    await app.state.pg_pool.close()
    logger.info("Database connection pool closed")


app = FastAPI(lifespan=lifespan, title="Users service")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)
register_exception_handlers(app)


@app.get("/")
async def root():
    return {"message": "Hello World"}


@app.get("/health", response_model=HealthResponse)
async def health():
    return HealthResponse(status="ok", timestamp=datetime.now(timezone.utc).isoformat())


app.include_router(user_router)


if __name__ == "__main__":
    uvicorn.run(app, host=API_HOST, port=API_PORT)
