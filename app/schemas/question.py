import json
from pydantic import BaseModel, Field, StrictInt, ValidationError, field_validator
from typing import Any, Optional
from datetime import datetime

OPTION_NUMBERS = (1, 2, 3, 4)

def is_option_number(value: Any) -> bool:
    # bool is an int subclass and 2.0 == 2, neither is an option number
    return type(value) is int and value in OPTION_NUMBERS

class QuestionPayload(BaseModel):
    """The JSON document stored in ``Question.body``."""
    topic_id: Optional[int] = None
    option1: str = ""
    option2: str = ""
    option3: str = ""
    option4: str = ""
    correct_option: StrictInt = 1

    @field_validator("correct_option")
    @classmethod
    def correct_option_in_range(cls, value: int) -> int:
        if not is_option_number(value):
            raise ValueError("correct_option must be 1, 2, 3 or 4")
        return value

class QuestionWrite(BaseModel):
    title: str
    body: Optional[str] = None
    topicId: Optional[int] = None

    @field_validator("title")
    @classmethod
    def title_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("title required")
        return value

    @field_validator("body")
    @classmethod
    def check_embedded_options(cls, value: Optional[str]) -> Optional[str]:
        if not value:
            return None
        try:
            parsed = json.loads(value)
        except ValueError:
            # Plain-text bodies are allowed
            return value
        if isinstance(parsed, dict):
            try:
                QuestionPayload.model_validate(parsed)
            except ValidationError as e:
                error = e.errors()[0]
                field = ".".join(str(part) for part in error["loc"])
                raise ValueError(f"{field}: {error['msg']}")
        return value

class Question(BaseModel):
    id: int
    title: str
    body: Optional[str] = None
    topic_id: Optional[int] = None
    created_by: Optional[int] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class AnswerWrite(BaseModel):
    body: str = Field(min_length=1)
    is_correct: bool = False

class Answer(BaseModel):
    id: int
    question_id: int
    body: str
    is_correct: bool
    created_by: Optional[int] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
