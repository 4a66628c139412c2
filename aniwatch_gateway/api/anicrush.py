from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

router = APIRouter(tags=["anicrush"])


@router.get("/anicrush", response_class=PlainTextResponse)
async def anicrush():
    """Placeholder until an Anicrush scraper exists."""
    return "Anicrush could be implemented in future."
