"""API router registration helpers.

To avoid import-time side effects (e.g., initializing the OpenAI client) during
test collection or when importing submodules, routers are imported lazily
inside `register_routes` rather than at module import time.
"""

from fastapi import FastAPI


def register_routes(app: FastAPI) -> None:
    """Attach all API routers (lazy imports)."""
    from quizforge.api.quiz import router as quiz_router
    from quizforge.api.quiz_submissions import router as quiz_submissions_router
    from quizforge.api.system import router as system_router

    for router in (system_router, quiz_router, quiz_submissions_router):
        app.include_router(router)
