from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime

class LessonCreate(BaseModel):
    topic_id: int
    title: str
    slug: Optional[str] = None
    description: Optional[str] = None
    level: Optional[str] = None
    position: Optional[int] = None
    is_public: Optional[bool] = True

class LessonUpdate(BaseModel):
    topic_id: Optional[int] = None
    title: Optional[str] = None
    slug: Optional[str] = None
    description: Optional[str] = None
    level: Optional[str] = None
    position: Optional[int] = None
    is_public: Optional[bool] = None

class LessonResponse(BaseModel):
    id: int
    topic_id: int
    slug: str
    title: str
    description: Optional[str] = ""
    level: Optional[str] = ""
    position: int
    is_public: bool
    created_at: Optional[datetime] = None
    questions_count: Optional[int] = None

    model_config = ConfigDict(
        from_attributes=True
    )
