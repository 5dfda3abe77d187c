from mindlog.goals import routes as goals_router
from mindlog.journals import routes as journals_router
from mindlog.suggestions import routes as suggestions_router
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from mindlog.core.config import CORS_ORIGINS
from mindlog.core.database import Base, engine
from mindlog.core.logging_config import setup_logging

setup_logging()

app = FastAPI(
    title="Mindlog API",
    version="1.0.0",
    description="Backend for Mindlog: journaling and AI-suggested goals, tasks and habits.",
)

# CORS config
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(goals_router.router)
app.include_router(journals_router.router)
app.include_router(suggestions_router.router)


# DB Tables
@app.on_event("startup")
def create_tables():
    Base.metadata.create_all(bind=engine)
