"""Main API router aggregating all routes."""

from fastapi import APIRouter

from maos_ai.api.routes import chat, health, speech

api_router = APIRouter()

api_router.include_router(health.router)
api_router.include_router(chat.router)
api_router.include_router(speech.router)
