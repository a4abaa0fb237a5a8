import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Environment is loaded by Pydantic Settings (see quizforge.core.settings).
from quizforge.api import register_routes
from quizforge.core.database import init_db
from quizforge.core.exceptions import register_exception_handlers
from quizforge.core.logging import setup_logging
from quizforge.core.settings import settings

# Initialize logging early so all modules inherit the handlers/level
setup_logging(settings.log_level or settings.log_level_fallback)

app = FastAPI(title=settings.app_name)
register_exception_handlers(app)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_routes(app)

logger = logging.getLogger(__name__)
logger.info("%s initialized", settings.app_name)


@app.on_event("startup")
def _create_tables_on_startup() -> None:
    """Create quiz tables once at boot."""
    init_db()
    logger.info("Database tables ensured")
