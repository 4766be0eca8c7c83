import logging
from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from speak_admin.api.deps import get_current_admin, to_http_exception
from speak_admin.api.schemas.lesson_schemas import LessonResponse
from speak_admin.api.schemas.topic_schemas import TopicCreate, TopicResponse, TopicUpdate
from speak_admin.services.exceptions import AdminServiceError
from speak_admin.services.lesson_service import LessonService
from speak_admin.services.topic_service import TopicService
from speak_admin.utils.database import get_db

logger = logging.getLogger(__name__)
router = APIRouter(dependencies=[Depends(get_current_admin)])

@router.get("", response_model=List[TopicResponse])
async def list_topics(db: Session = Depends(get_db)):
    """
    话题列表（按位置升序，附带课程数）
    """
    return TopicService(db).list_topics()

@router.post("", response_model=TopicResponse, status_code=status.HTTP_201_CREATED)
async def create_topic(topic_data: TopicCreate, db: Session = Depends(get_db)):
    """
    创建话题
    """
    try:
        topic = TopicService(db).create_topic(topic_data.model_dump(exclude_unset=True))
    except AdminServiceError as e:
        raise to_http_exception(e)
    return {**topic.to_dict(), "lessons_count": 0}

@router.get("/{topic_id}", response_model=TopicResponse)
async def get_topic(topic_id: int, db: Session = Depends(get_db)):
    """
    根据ID获取话题
    """
    try:
        return TopicService(db).get_topic(topic_id)
    except AdminServiceError as e:
        raise to_http_exception(e)

@router.put("/{topic_id}", response_model=TopicResponse)
async def update_topic(topic_id: int, topic_data: TopicUpdate, db: Session = Depends(get_db)):
    """
    更新话题
    """
    try:
        return TopicService(db).update_topic(topic_id, topic_data.model_dump(exclude_unset=True))
    except AdminServiceError as e:
        raise to_http_exception(e)

@router.delete("/{topic_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_topic(topic_id: int, db: Session = Depends(get_db)):
    """
    删除话题及其课程、题目
    """
    try:
        TopicService(db).delete_topic(topic_id)
    except AdminServiceError as e:
        raise to_http_exception(e)

@router.get("/{topic_id}/lessons", response_model=List[LessonResponse])
async def list_topic_lessons(topic_id: int, db: Session = Depends(get_db)):
    """
    话题下的课程列表（附带题目数）
    """
    try:
        return LessonService(db).list_topic_lessons(topic_id)
    except AdminServiceError as e:
        raise to_http_exception(e)
