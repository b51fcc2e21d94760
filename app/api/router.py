from fastapi import APIRouter
from app.api.endpoints import chat, statements

api_router = APIRouter()

# Combine all sub-routers into one
api_router.include_router(chat.router)
api_router.include_router(statements.router)
