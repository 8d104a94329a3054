from pydantic import BaseModel, field_validator, model_validator
from typing import Optional
from datetime import datetime

class TopicBase(BaseModel):
    title: str
    description: Optional[str] = None
    timer_enabled: bool = False
    timer_seconds: Optional[int] = None

    @field_validator("title")
    @classmethod
    def title_required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("title required")
        return value

    @field_validator("description")
    @classmethod
    def blank_description_is_null(cls, value: Optional[str]) -> Optional[str]:
        return value or None

    @model_validator(mode="after")
    def check_timer(self):
        if self.timer_enabled and (self.timer_seconds is None or self.timer_seconds <= 0):
            raise ValueError("timer_seconds must be a positive number when the timer is enabled")
        if self.timer_seconds is not None and self.timer_seconds < 0:
            raise ValueError("timer_seconds cannot be negative")
        return self

class TopicCreate(TopicBase):
    pass

class TopicUpdate(TopicBase):
    pass

class Topic(TopicBase):
    id: int
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
