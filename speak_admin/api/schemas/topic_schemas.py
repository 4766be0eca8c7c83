from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime

class TopicCreate(BaseModel):
    name: str
    slug: Optional[str] = None
    short_description: Optional[str] = None
    long_description: Optional[str] = None
    image: Optional[str] = None
    position: Optional[int] = None

class TopicUpdate(BaseModel):
    name: Optional[str] = None
    slug: Optional[str] = None
    short_description: Optional[str] = None
    long_description: Optional[str] = None
    image: Optional[str] = None
    position: Optional[int] = None

class TopicResponse(BaseModel):
    id: int
    slug: str
    name: str
    short_description: Optional[str] = ""
    long_description: Optional[str] = ""
    image: Optional[str] = ""
    position: int
    created_at: Optional[datetime] = None
    lessons_count: Optional[int] = None

    model_config = ConfigDict(
        from_attributes=True
    )
