from quizforge.api.system.routes import router

__all__ = ["router"]
