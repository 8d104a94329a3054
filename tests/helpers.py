"""Row factories shared by the API tests."""

import json
from typing import Optional

from sqlalchemy import func, select

from app.core.security import get_password_hash
from app.db.session import AsyncSessionLocal
from app.models.question import Answer, Question
from app.models.quiz_result import QuizResult
from app.models.topic import Topic
from app.models.user import User


async def add_rows(*rows):
    async with AsyncSessionLocal() as db:
        db.add_all(rows)
        await db.commit()
    return rows


async def create_user(email: str = "user@example.com", password: str = "secret", role: str = "user",
                      username: Optional[str] = None) -> int:
    password_hash, salt = get_password_hash(password)
    user = User(email=email, username=username, password_hash=password_hash, salt=salt, role=role)
    await add_rows(user)
    return user.id


async def create_topic(title: str = "Python basics", description: Optional[str] = None) -> int:
    topic = Topic(title=title, description=description)
    await add_rows(topic)
    return topic.id


def question_body(topic_id: int, correct_option: int) -> str:
    return json.dumps({
        "topic_id": topic_id,
        "option1": "A",
        "option2": "B",
        "option3": "C",
        "option4": "D",
        "correct_option": correct_option,
    })


async def create_question(topic_id: int, correct_option: int = 1, title: str = "Pick one") -> int:
    question = Question(title=title, body=question_body(topic_id, correct_option), topic_id=topic_id)
    await add_rows(question)
    return question.id


async def create_answer(question_id: int, body: str = "Because", is_correct: bool = False) -> int:
    answer = Answer(question_id=question_id, body=body, is_correct=is_correct)
    await add_rows(answer)
    return answer.id


async def create_result(user_id: int, topic_id: int, score: int, total_questions: int) -> int:
    result = QuizResult(user_id=user_id, topic_id=topic_id, score=score, total_questions=total_questions)
    await add_rows(result)
    return result.id


async def count_rows(model, **filters) -> int:
    stmt = select(func.count()).select_from(model)
    for column, value in filters.items():
        stmt = stmt.where(getattr(model, column) == value)
    async with AsyncSessionLocal() as db:
        return (await db.execute(stmt)).scalar_one()


def as_user(user_id: int) -> dict:
    return {"x-user-id": str(user_id)}


SUPER_ADMIN = {"x-user-id": "0"}
