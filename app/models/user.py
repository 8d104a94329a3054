from sqlalchemy import Column, Integer, String, DateTime, Enum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from app.db.base_class import Base

ROLES = ("admin", "quiz_manager", "user")

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    username = Column(String(50), unique=True)
    # Both null for accounts created through Google sign-in
    password_hash = Column(String(255))
    salt = Column(String(64))
    role = Column(Enum(*ROLES, name="user_role"), nullable=False, default="user", server_default="user")
    reset_token = Column(String(255), index=True)
    reset_expires = Column(DateTime)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    results = relationship("QuizResult", back_populates="user", passive_deletes=True)
