from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from speak_admin.api.deps import get_current_admin
from speak_admin.api.schemas.dashboard_schemas import DashboardCounts
from speak_admin.services.dashboard_service import DashboardService
from speak_admin.utils.database import get_db

router = APIRouter(dependencies=[Depends(get_current_admin)])

@router.get("/counts", response_model=DashboardCounts)
async def get_counts(db: Session = Depends(get_db)):
    """
    首页统计：用户、话题、课程、题目、打卡记录数
    """
    return DashboardService(db).get_counts()
