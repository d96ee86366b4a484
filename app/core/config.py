from os import getenv

class Settings:
    DATABASE_URL = getenv("DATABASE_URL", "postgresql+psycopg://taskmanager:taskmanager@db:5432/taskmanager")

    JWT_SECRET = getenv("JWT_SECRET", "dev-secret-change-in-prod")
    JWT_EXPIRE_MIN = int(getenv("JWT_EXPIRE_MIN", "15"))  # 15 minutes
    JWT_REFRESH_EXPIRE_MIN = int(getenv("JWT_REFRESH_EXPIRE_MIN", "43200"))  # 30 days

    LOG_LEVEL = getenv("LOG_LEVEL", "INFO")

    # Voice notes
    VOICE_NOTE_DIR = getenv("VOICE_NOTE_DIR", "./data/voice-notes")
    VOICE_NOTE_URL_PREFIX = getenv("VOICE_NOTE_URL_PREFIX", "/voice-notes")
    VOICE_NOTE_MAX_BYTES = int(getenv("VOICE_NOTE_MAX_BYTES", str(10 * 1024 * 1024)))

settings = Settings()
