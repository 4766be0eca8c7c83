from pydantic import BaseModel, ConfigDict
from typing import Optional, List
from datetime import datetime

class QuestionFields(BaseModel):
    position: Optional[int] = None
    prompt: Optional[str] = None
    simplified_text: Optional[str] = None
    traditional_text: Optional[str] = None
    phonetic: Optional[str] = None
    image_url: Optional[str] = None
    exam: Optional[str] = None
    kind: Optional[str] = None
    explanation: Optional[str] = None

class QuestionCreate(QuestionFields):
    lesson_id: int
    prompt: str

class QuestionUpdate(QuestionFields):
    lesson_id: Optional[int] = None

class QuestionBatchCreate(BaseModel):
    lesson_id: int
    questions: List[QuestionFields]

class QuestionResponse(BaseModel):
    id: int
    lesson_id: int
    position: int
    prompt: str
    simplified_text: Optional[str] = ""
    traditional_text: Optional[str] = ""
    phonetic: Optional[str] = ""
    image_url: Optional[str] = ""
    exam: str
    kind: str
    explanation: Optional[str] = ""
    created_at: Optional[datetime] = None

    model_config = ConfigDict(
        from_attributes=True
    )
