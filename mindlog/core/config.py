import os
from dotenv import load_dotenv

load_dotenv()  # Load from .env file

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./mindlog.db")

# Token & Auth
SECRET_KEY = os.getenv("SECRET_KEY")
ALGORITHM = os.getenv("ALGORITHM", "HS256")

# OpenAI
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
OPENAI_CHAT_MODEL = os.getenv("OPENAI_CHAT_MODEL")
EXTRACTION_TIMEOUT_SECONDS = float(os.getenv("EXTRACTION_TIMEOUT_SECONDS", "30"))
EXTRACTION_MAX_TOKENS = int(os.getenv("EXTRACTION_MAX_TOKENS", "1024"))

# Suggestion pipeline
SUGGESTION_BATCH_LIMIT = int(os.getenv("SUGGESTION_BATCH_LIMIT", "3"))
MIN_ENTRY_LENGTH = int(os.getenv("MIN_ENTRY_LENGTH", "100"))
SUGGESTION_MAX_WORKERS = int(os.getenv("SUGGESTION_MAX_WORKERS", "4"))

# Logging & CORS
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "").split(",") if o.strip()]
