from quizforge.api.quiz_submissions.routes import router

__all__ = ["router"]
