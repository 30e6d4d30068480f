from fastapi import APIRouter

from proppool.api.admin import router as admin_router
from proppool.api.leaderboard import router as leaderboard_router
from proppool.api.picks import router as picks_router
from proppool.api.pipeline import router as pipeline_router
from proppool.api.players import router as players_router
from proppool.api.props import router as props_router

api_router = APIRouter()
api_router.include_router(props_router)
api_router.include_router(players_router)
api_router.include_router(picks_router)
api_router.include_router(leaderboard_router)

api_router.include_router(admin_router)
api_router.include_router(pipeline_router)
