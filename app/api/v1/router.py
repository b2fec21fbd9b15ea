from fastapi import APIRouter

from app.api.v1.endpoints import (
    auth,
    compare,
    leaderboard,
    pvp,
    roast,
    translate,
    tts,
)

router = APIRouter()

router.include_router(auth.router, prefix="/auth")
router.include_router(roast.router, prefix="/roast")
router.include_router(compare.router, prefix="/compare")
router.include_router(translate.router, prefix="/translate")
router.include_router(tts.router, prefix="/tts")
router.include_router(leaderboard.router, prefix="/leaderboard")
router.include_router(pvp.router, prefix="/pvp")
