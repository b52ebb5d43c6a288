import os
import yaml

ROOT_PATH = os.path.dirname(__file__)
CONFIG_FILE_PATH = os.path.join(ROOT_PATH, "env.yaml")

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./identity.db")
    API_PREFIX = data.get("API_PREFIX", "/api")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    JWT_SECRET = data.get("JWT_SECRET", "dev-secret-key-change-in-production-0123456789")
    JWT_ACCESS_TTL_SECONDS = int(data.get("JWT_ACCESS_TTL_SECONDS", 900))
    JWT_REFRESH_TTL_SECONDS = int(data.get("JWT_REFRESH_TTL_SECONDS", 604800))
    SESSION_TTL_SECONDS = int(data.get("SESSION_TTL_SECONDS", 86400))
    BCRYPT_ROUNDS = int(data.get("BCRYPT_ROUNDS", 12))
    SESSION_COOKIE_NAME = data.get("SESSION_COOKIE_NAME", "session_id")
    SESSION_COOKIE_SECURE = bool(data.get("SESSION_COOKIE_SECURE", False))
    ENABLE_CLEANUP_JOBS = bool(data.get("ENABLE_CLEANUP_JOBS", False))
    CLEANUP_SESSIONS_INTERVAL_SECONDS = int(
        data.get("CLEANUP_SESSIONS_INTERVAL_SECONDS", 3600)
    )
    CLEANUP_TOKENS_INTERVAL_SECONDS = int(
        data.get("CLEANUP_TOKENS_INTERVAL_SECONDS", 21600)
    )
