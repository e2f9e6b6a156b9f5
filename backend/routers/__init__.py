# backend/routers/__init__.py

from .league import router as league_router
from .load import router as load_router
