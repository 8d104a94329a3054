# Import all models here so metadata and Alembic see every table
from app.db.base_class import Base  # noqa: F401
from app.models.topic import Topic  # noqa: F401
from app.models.question import Question, Answer  # noqa: F401
from app.models.user import User  # noqa: F401
from app.models.quiz_result import QuizResult  # noqa: F401
