"""
FastAPI Countdown Backend package.

Countdown CRUD endpoints live in `routers.countdowns`; the PNG rendering
pipeline lives in `rendering`. The ASGI app is `src.api.main:app`.
"""
