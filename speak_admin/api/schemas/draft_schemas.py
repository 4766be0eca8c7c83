from pydantic import BaseModel, Field
from typing import Any, Dict, List, Literal, Optional

class DraftRequest(BaseModel):
    draft_type: Literal["topic", "lesson", "questions"]
    subject: str = Field(min_length=1)
    difficulty: str = "HSK1"
    question_count: int = Field(default=5, ge=1, le=50)
    exam: str = "OTHER"
    question_kinds: Optional[List[str]] = None

class DraftResponse(BaseModel):
    draft_type: str
    draft: Dict[str, Any]
