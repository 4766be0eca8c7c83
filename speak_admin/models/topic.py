from sqlalchemy import Column, String, Integer, Text
from sqlalchemy.orm import relationship
from .base import BaseModel

"""
话题模型
口语课程的最上层分组,包括slug、名称、短描述、长描述、封面图和排序位置。
"""
class Topic(BaseModel):
    __tablename__ = "topics"

    slug = Column(String(200), unique=True, index=True, nullable=False)
    name = Column(String(200), nullable=False)
    short_description = Column(String(500), default="")
    long_description = Column(Text, default="")
    image = Column(String(500), default="")
    position = Column(Integer, default=1)

    lessons = relationship(
        "Lesson", back_populates="topic", cascade="all, delete-orphan"
    )

    def to_dict(self):
        return {
            "id": self.id,
            "slug": self.slug,
            "name": self.name,
            "short_description": self.short_description,
            "long_description": self.long_description,
            "image": self.image,
            "position": self.position,
            "created_at": self.created_at.isoformat() if self.created_at else None
        }
