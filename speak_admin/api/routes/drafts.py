import logging
from fastapi import APIRouter, Depends, HTTPException, Request, status

import openai

from speak_admin.api.deps import get_current_admin
from speak_admin.api.schemas.draft_schemas import DraftRequest, DraftResponse
from speak_admin.services.content_draft_service import ContentDraftService
from speak_admin.utils.llm_client import LLMResponseError

logger = logging.getLogger(__name__)
router = APIRouter(dependencies=[Depends(get_current_admin)])


def get_draft_service(request: Request) -> ContentDraftService:
    """草稿服务在应用启动时创建，测试中可以通过 dependency_overrides 替换"""
    service = getattr(request.app.state, "draft_service", None)
    if service is None:
        service = ContentDraftService()
        request.app.state.draft_service = service
    return service


@router.post("", response_model=DraftResponse)
async def generate_draft(draft_request: DraftRequest,
                         draft_service: ContentDraftService = Depends(get_draft_service)):
    """
    AI生成话题/课程/题目草稿（不保存）
    保存时调用对应的创建接口
    """
    try:
        draft = await draft_service.generate(
            draft_request.draft_type,
            draft_request.subject,
            difficulty=draft_request.difficulty,
            question_count=draft_request.question_count,
            exam=draft_request.exam,
            question_kinds=draft_request.question_kinds,
        )
    except (LLMResponseError, openai.OpenAIError) as e:
        logger.error(f"草稿生成失败: {e}")
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="内容生成服务暂时不可用"
        )
    return {"draft_type": draft_request.draft_type, "draft": draft}
