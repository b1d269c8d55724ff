"""
Lesson planner API server.

Run with: uvicorn main:app --reload
"""

import logging
import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI

load_dotenv(".env.local")

from core import close_engine, init_db
from web_api.errors import register_error_handlers
from web_api.routes import editor, lessons, modules

logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_db()
    yield
    await close_engine()


app = FastAPI(
    title="Lesson Planner API",
    description="Generate, edit and store structured lesson plans.",
    version="1.0.0",
    lifespan=lifespan,
)

register_error_handlers(app)
app.include_router(lessons.router)
app.include_router(modules.router)
app.include_router(editor.router)


@app.get("/api/health")
async def health():
    return {"ok": True}
