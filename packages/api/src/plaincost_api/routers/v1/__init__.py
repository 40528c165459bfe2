from fastapi import APIRouter

from plaincost_api.routers.v1 import compare, metros, rankings, search, states, stats

v1_router = APIRouter(prefix="/v1")

v1_router.include_router(metros.router)
v1_router.include_router(states.router)
v1_router.include_router(rankings.router)
v1_router.include_router(stats.router)
v1_router.include_router(compare.router)
v1_router.include_router(search.router)
