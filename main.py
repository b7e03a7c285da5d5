import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import get_settings

# Routers
from routers.admin import router as admin_router
from routers.health import router as health_router
from routers.sessions import router as sessions_router
from routers.subjects import router as subjects_router

settings = get_settings()

logger = logging.getLogger("subject-chat")
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)

app = FastAPI(title="Subject Chat – Answer API")

# Allow calls from the chat widget's dev server and production site
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
def health_root():
    return {"ok": True}


# Register routers
app.include_router(subjects_router)  # /subjects/...
app.include_router(sessions_router)  # /sessions/...
app.include_router(admin_router)  # /admin/...
app.include_router(health_router)  # /health/...
