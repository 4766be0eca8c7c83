import logging
from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from speak_admin.api.deps import get_current_admin, to_http_exception
from speak_admin.api.schemas.lesson_schemas import LessonCreate, LessonResponse, LessonUpdate
from speak_admin.api.schemas.question_schemas import QuestionResponse
from speak_admin.services.exceptions import AdminServiceError
from speak_admin.services.lesson_service import LessonService
from speak_admin.services.question_service import QuestionService
from speak_admin.utils.database import get_db

logger = logging.getLogger(__name__)
router = APIRouter(dependencies=[Depends(get_current_admin)])

@router.post("", response_model=LessonResponse, status_code=status.HTTP_201_CREATED)
async def create_lesson(lesson_data: LessonCreate, db: Session = Depends(get_db)):
    """
    创建课程
    """
    try:
        lesson = LessonService(db).create_lesson(lesson_data.model_dump(exclude_unset=True))
    except AdminServiceError as e:
        raise to_http_exception(e)
    return {**lesson.to_dict(), "questions_count": 0}

@router.get("/{lesson_id}", response_model=LessonResponse)
async def get_lesson(lesson_id: int, db: Session = Depends(get_db)):
    """
    根据ID获取课程
    """
    try:
        return LessonService(db).get_lesson(lesson_id)
    except AdminServiceError as e:
        raise to_http_exception(e)

@router.put("/{lesson_id}", response_model=LessonResponse)
async def update_lesson(lesson_id: int, lesson_data: LessonUpdate, db: Session = Depends(get_db)):
    """
    更新课程
    """
    try:
        return LessonService(db).update_lesson(lesson_id, lesson_data.model_dump(exclude_unset=True))
    except AdminServiceError as e:
        raise to_http_exception(e)

@router.delete("/{lesson_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_lesson(lesson_id: int, db: Session = Depends(get_db)):
    """
    删除课程及其题目
    """
    try:
        LessonService(db).delete_lesson(lesson_id)
    except AdminServiceError as e:
        raise to_http_exception(e)

@router.get("/{lesson_id}/questions", response_model=List[QuestionResponse])
async def list_lesson_questions(lesson_id: int, db: Session = Depends(get_db)):
    """
    课程下的题目列表
    """
    try:
        return QuestionService(db).list_lesson_questions(lesson_id)
    except AdminServiceError as e:
        raise to_http_exception(e)
