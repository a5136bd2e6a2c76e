import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from taskwatch.modules.config import CORS_ORIGINS, LOG_LEVEL
from taskwatch.modules.database import connect_to_db, disconnect_from_db, init_db
from taskwatch.modules.users.api.router import router as users_graphql_router

logging.basicConfig(level=LOG_LEVEL)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    await connect_to_db()
    await init_db()
    yield
    # Shutdown
    await disconnect_from_db()

app = FastAPI(title="Taskwatch", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(users_graphql_router, prefix="/graphql", tags=["Users"])


@app.get("/")
async def root():
    return {"status": "online", "system": "Taskwatch"}
