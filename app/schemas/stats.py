from pydantic import BaseModel
from typing import List, Optional

class UserStat(BaseModel):
    user_id: int
    email: Optional[str] = None
    username: Optional[str] = None
    attempts: int
    averageScorePercent: float

class TopicStat(BaseModel):
    topic_id: int
    title: Optional[str] = None
    attempts: int
    averageScorePercent: float

class Stats(BaseModel):
    usersCount: int
    resultsCount: int
    topicsCount: int
    averageScorePercent: float
    byUser: List[UserStat]
    byTopic: List[TopicStat]
