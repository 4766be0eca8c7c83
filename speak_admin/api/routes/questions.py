import logging
from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from speak_admin.api.deps import get_current_admin, to_http_exception
from speak_admin.api.schemas.question_schemas import (
    QuestionBatchCreate, QuestionCreate, QuestionResponse, QuestionUpdate
)
from speak_admin.services.exceptions import AdminServiceError
from speak_admin.services.question_service import QuestionService
from speak_admin.utils.database import get_db

logger = logging.getLogger(__name__)
router = APIRouter(dependencies=[Depends(get_current_admin)])

@router.post("", response_model=QuestionResponse, status_code=status.HTTP_201_CREATED)
async def create_question(question_data: QuestionCreate, db: Session = Depends(get_db)):
    """
    创建题目
    """
    try:
        return QuestionService(db).create_question(question_data.model_dump(exclude_unset=True))
    except AdminServiceError as e:
        raise to_http_exception(e)

@router.post("/batch", response_model=List[QuestionResponse], status_code=status.HTTP_201_CREATED)
async def create_questions(batch: QuestionBatchCreate, db: Session = Depends(get_db)):
    """
    批量创建题目（用于保存AI生成的题目草稿）
    """
    try:
        return QuestionService(db).create_questions(
            batch.lesson_id,
            [q.model_dump(exclude_unset=True) for q in batch.questions],
        )
    except AdminServiceError as e:
        raise to_http_exception(e)

@router.get("/{question_id}", response_model=QuestionResponse)
async def get_question(question_id: int, db: Session = Depends(get_db)):
    try:
        return QuestionService(db).get_question(question_id)
    except AdminServiceError as e:
        raise to_http_exception(e)

@router.put("/{question_id}", response_model=QuestionResponse)
async def update_question(question_id: int, question_data: QuestionUpdate, db: Session = Depends(get_db)):
    try:
        return QuestionService(db).update_question(question_id, question_data.model_dump(exclude_unset=True))
    except AdminServiceError as e:
        raise to_http_exception(e)

@router.delete("/{question_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_question(question_id: int, db: Session = Depends(get_db)):
    try:
        QuestionService(db).delete_question(question_id)
    except AdminServiceError as e:
        raise to_http_exception(e)
