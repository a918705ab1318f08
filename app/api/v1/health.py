from fastapi import APIRouter, Request

router = APIRouter()


@router.get("/health", summary="Health Check", description="Check the health status of the application.")
async def health_check(request: Request):
    state = request.app.state
    summarizer = getattr(state, "summarizer", None)
    return {
        "status": "healthy",
        "summarizer_configured": bool(summarizer is not None and summarizer.configured),
        "auth_configured": getattr(state, "auth_service", None) is not None,
        "history_configured": getattr(state, "history_store", None) is not None,
    }
