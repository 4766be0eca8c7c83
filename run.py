import uvicorn
from speak_admin.config.settings import settings

if __name__ == "__main__":
    uvicorn.run(
        "speak_admin.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )
