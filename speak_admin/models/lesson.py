from sqlalchemy import Column, String, Integer, Text, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from .base import BaseModel

"""
课程模型
隶属于某个话题,包括slug、标题、描述、难度标签、排序位置以及是否公开。
"""
class Lesson(BaseModel):
    __tablename__ = "lessons"

    topic_id = Column(Integer, ForeignKey("topics.id", ondelete="CASCADE"), nullable=False, index=True)
    slug = Column(String(200), nullable=False)
    title = Column(String(200), nullable=False)
    description = Column(Text, default="")
    level = Column(String(50), default="")
    position = Column(Integer, default=1)
    is_public = Column(Boolean, default=True)

    topic = relationship("Topic", back_populates="lessons")
    questions = relationship(
        "Question", back_populates="lesson", cascade="all, delete-orphan"
    )

    def to_dict(self):
        return {
            "id": self.id,
            "topic_id": self.topic_id,
            "slug": self.slug,
            "title": self.title,
            "description": self.description,
            "level": self.level,
            "position": self.position,
            "is_public": self.is_public,
            "created_at": self.created_at.isoformat() if self.created_at else None
        }
