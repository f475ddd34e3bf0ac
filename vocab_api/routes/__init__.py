from fastapi import APIRouter
from . import words

router = APIRouter()
for route in (words,):
    router.include_router(route.router)
