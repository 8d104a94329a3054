from pydantic import BaseModel, Field, StrictInt, model_validator
from typing import Dict, Optional
from datetime import datetime

class QuizResultCreate(BaseModel):
    topic_id: int = Field(gt=0)
    score: int = Field(ge=0)
    total_questions: int = Field(ge=0)

    @model_validator(mode="after")
    def score_within_total(self):
        if self.score > self.total_questions:
            raise ValueError("score cannot exceed total_questions")
        return self

class QuizResult(BaseModel):
    id: int
    user_id: int
    topic_id: int
    score: int
    total_questions: int
    taken_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class AdminQuizResult(QuizResult):
    email: Optional[str] = None
    username: Optional[str] = None
    topic_title: Optional[str] = None

class AttemptSubmit(BaseModel):
    # question id -> selected option number
    answers: Dict[int, StrictInt] = {}

class AttemptOutcome(BaseModel):
    topic_id: int
    score: int
    total_questions: int
    percentage: float
    saved: bool
    correct: Dict[int, bool]
