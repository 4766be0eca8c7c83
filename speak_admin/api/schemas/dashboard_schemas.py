from pydantic import BaseModel

class DashboardCounts(BaseModel):
    users: int
    topics: int
    lessons: int
    questions: int
    streaks: int
