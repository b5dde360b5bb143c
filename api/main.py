from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from articles import router as articles_router
from auth import router as auth_router
from campaigns import router as campaigns_router
from companies import router as companies_router
from contacts import router as contacts_router
from core import db, errors, settings
from core.logging_config import setup_logging
from directory import router as directory_router
from events import router as events_router
from news import router as news_router
from research import router as research_router
from webhooks import router as webhooks_router

setup_logging()


@asynccontextmanager
async def lifespan(_: FastAPI):
    # Initialize the DB pool once per process.
    await db.init_pool()
    try:
        yield
    finally:
        await db.close_pool()


app = FastAPI(title="longevity-cms-api", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

errors.register_exception_handlers(app)

app.include_router(auth_router.router, tags=["auth"])
app.include_router(companies_router.router, tags=["companies"])
app.include_router(contacts_router.router, tags=["contacts"])
app.include_router(articles_router.router, tags=["articles"])
app.include_router(events_router.router, tags=["events"])
app.include_router(news_router.router, tags=["news"])
app.include_router(campaigns_router.router, tags=["campaigns"])
app.include_router(research_router.router, tags=["research"])
app.include_router(directory_router.router, tags=["directory"])
app.include_router(webhooks_router.router, tags=["webhooks"])


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.get("/")
def root() -> dict:
    return {"message": "longevity-cms api"}
