from fastapi import APIRouter

from app.api.routers import bookmarks, items, metadata, rights, templates

api_router = APIRouter()

api_router.include_router(metadata.router)
api_router.include_router(rights.router)
api_router.include_router(items.router)
api_router.include_router(bookmarks.router)
api_router.include_router(templates.router)
