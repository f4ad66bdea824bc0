# config.py
import os
from pathlib import Path
from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent

load_dotenv()

class Config:
    SQLITE_DB_PATH = os.path.join(BASE_DIR, 'journey.db')
    DATABASE_URL = os.getenv('DATABASE_URL', f"sqlite:///{SQLITE_DB_PATH}")

    # Guided Study upstream
    OPENAI_API_KEY = os.getenv('OPENAI_API_KEY')
    OPENAI_API_URL = os.getenv('OPENAI_API_URL', 'https://api.openai.com/v1/chat/completions')
    GUIDED_STUDY_MODEL = 'gpt-4.1-mini'
    UPSTREAM_TIMEOUT = int(os.getenv('UPSTREAM_TIMEOUT', 60))

    JOURNEY_INSIGHTS_KEY = 'journey_insights_v1'

    MAX_CONTENT_LENGTH = 1 * 1024 * 1024  # 1MB is plenty for chat payloads
