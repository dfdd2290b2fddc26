import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from auth import router as auth_router
from core import db, logs, settings
from favorites import router as favorites_router
from preferences import router as preferences_router
from quotes import router as quotes_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    logs.configure_logging()
    # Initialize the DB pool once per process.
    await db.init_pool()
    if settings.apply_schema_on_startup():
        await db.apply_schema()
    logger.info("quote_browser_api_started")
    try:
        yield
    finally:
        await db.close_pool()


app = FastAPI(title="quote-browser", lifespan=lifespan)

# Allow the local frontend dev server to call this API from the browser.
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router.router, tags=["auth"])
app.include_router(quotes_router.router, tags=["quotes"])
app.include_router(favorites_router.router, tags=["favorites"])
app.include_router(preferences_router.router, tags=["preferences"])


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.get("/")
def root() -> dict:
    return {"message": "quote-browser api"}
