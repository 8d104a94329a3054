from sqlalchemy import Column, Integer, String, Boolean, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.db.base_class import Base

class Topic(Base):
    __tablename__ = "topics"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    description = Column(String(1000))
    timer_enabled = Column(Boolean, nullable=False, default=False, server_default="0")
    timer_seconds = Column(Integer)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Rows are removed by the database's ON DELETE CASCADE
    questions = relationship("Question", back_populates="topic", passive_deletes=True)
    results = relationship("QuizResult", back_populates="topic", passive_deletes=True)
