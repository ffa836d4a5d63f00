"""
V1 API router aggregator — wires all endpoint modules together.
"""

from fastapi import APIRouter

from app.api.v1.endpoints import auth, content

api_router = APIRouter()

# Auth (register, login, me)
api_router.include_router(auth.router)

# Documents, news, newsletter
api_router.include_router(content.router)
