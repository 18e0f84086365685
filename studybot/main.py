"""
StudyBot — Main Application
FastAPI app. Mounts the webhook router and CORS.
Database initialization and question bank seeding on startup.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from studybot.config import CORS_ORIGINS, LOG_LEVEL, PORT
from studybot.database import SessionLocal, init_db
from studybot.dispatch.menus import validate_table_completeness
from studybot.handlers import build_dispatcher
from studybot.services import Services
from studybot.services.manychat import ManyChatClient
from studybot.state.store import SqlSessionStore

logger = logging.getLogger("studybot")

VERSION = "1.0.0"


# ─── Lifespan (startup/shutdown) ─────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: init DB, seed questions, wire the dispatcher."""
    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL, logging.INFO),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    )

    # A gap in the menu table is a configuration error; fail before serving
    validate_table_completeness()

    logger.info("Initializing database...")
    init_db()

    services = getattr(app.state, "services", None) or Services.build(SessionLocal)
    count = services.questions.count()
    if count == 0:
        from studybot.content.seed_questions import QUESTIONS
        logger.info("Seeding question bank...")
        services.questions.seed(QUESTIONS)
        logger.info(f"Seeded {services.questions.count()} questions")
    else:
        logger.info(f"Question bank has {count} questions")

    app.state.services = services
    app.state.dispatcher = build_dispatcher(SqlSessionStore(SessionLocal), services)
    if not hasattr(app.state, "manychat"):
        app.state.manychat = ManyChatClient()

    logger.info(f"StudyBot v{VERSION} ready")
    yield
    logger.info("Shutting down")


# ─── App ─────────────────────────────────────────────────────────────────────

app = FastAPI(
    title="StudyBot",
    description="Chat tutor webhook: command parser, menu state machine, dispatcher",
    version=VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

from studybot.routers import webhook  # noqa: E402
app.include_router(webhook.router)


@app.get("/health")
async def health():
    return {"status": "ok", "version": VERSION}


# ─── Run ─────────────────────────────────────────────────────────────────────

if __name__ == "__main__":
    import uvicorn

    uvicorn.run("studybot.main:app", host="0.0.0.0", port=PORT)
