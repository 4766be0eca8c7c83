from sqlalchemy import Column, String, Integer, Text, ForeignKey
from sqlalchemy.orm import relationship
from .base import BaseModel

"""
题目模型
隶属于某个课程,包括排序位置、题干、简体/繁体文本、拼音、图片、考试标签、题型和解析。
"""

DEFAULT_EXAM = "OTHER"
DEFAULT_KIND = "mcq"


class Question(BaseModel):
    __tablename__ = "questions"

    lesson_id = Column(Integer, ForeignKey("lessons.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, default=1)
    prompt = Column(Text, nullable=False)
    simplified_text = Column(Text, default="")
    traditional_text = Column(Text, default="")
    phonetic = Column(String(500), default="")
    image_url = Column(String(500), default="")
    exam = Column(String(50), default=DEFAULT_EXAM)
    kind = Column(String(50), default=DEFAULT_KIND)
    explanation = Column(Text, default="")

    lesson = relationship("Lesson", back_populates="questions")

    def to_dict(self):
        return {
            "id": self.id,
            "lesson_id": self.lesson_id,
            "position": self.position,
            "prompt": self.prompt,
            "simplified_text": self.simplified_text,
            "traditional_text": self.traditional_text,
            "phonetic": self.phonetic,
            "image_url": self.image_url,
            "exam": self.exam,
            "kind": self.kind,
            "explanation": self.explanation,
            "created_at": self.created_at.isoformat() if self.created_at else None
        }
