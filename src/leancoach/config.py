"""
Lean Coach Configuration

Configuration class for the Lean A3 coach service.
"""
import os
from pathlib import Path
from urllib.parse import quote_plus
from dotenv import load_dotenv

# Load .env file from project root
_env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(_env_path)


class Config:
    """Configuration class for Lean Coach API"""

    # Base paths
    PACKAGE_DIR = Path(__file__).parent
    PROMPTS_DIR = PACKAGE_DIR / "prompts"
    TEMPLATES_DIR = PACKAGE_DIR / "export" / "templates"
    MIGRATIONS_DIR = PACKAGE_DIR / "migrations"

    # Database settings
    DB_HOST = os.getenv("DB_HOST", "localhost")
    DB_PORT = os.getenv("DB_PORT", "5432")
    DB_NAME = os.getenv("DB_NAME", "leancoach")
    DB_USER = os.getenv("DB_USER", "postgres")
    DB_PASSWORD = os.getenv("DB_PASSWORD", "")
    POSTGRES_DSN = os.getenv("POSTGRES_DSN", "")

    # API settings
    API_HOST = os.getenv("API_HOST", "127.0.0.1")
    API_PORT = int(os.getenv("API_PORT", "8100"))
    CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]

    # LLM settings (default coach runs on Ollama)
    LLM_BASE_URL = os.getenv("LLM_BASE_URL", "http://localhost:11434")
    DEFAULT_MODEL = os.getenv("DEFAULT_MODEL", "qwen2.5:7b")
    LLM_TIMEOUT = float(os.getenv("LLM_TIMEOUT", "120"))

    # OpenAI-compatible endpoint used when an organization stores its own key
    OPENAI_BASE_URL = os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1")
    OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")

    # Coach chat
    CHAT_HISTORY_LIMIT = int(os.getenv("CHAT_HISTORY_LIMIT", "20"))
    CHAT_TEMPERATURE = float(os.getenv("CHAT_TEMPERATURE", "0.4"))
    CHAT_MAX_TOKENS = int(os.getenv("CHAT_MAX_TOKENS", "1024"))

    # JWT settings
    JWT_SECRET = os.getenv("JWT_SECRET", "leancoach-secret-key-change-in-production")
    JWT_ALGORITHM = "HS256"
    JWT_EXPIRATION_HOURS = int(os.getenv("JWT_EXPIRATION_HOURS", "24"))

    # Password hashing
    PASSWORD_SALT_ROUNDS = int(os.getenv("PASSWORD_SALT_ROUNDS", "12"))

    # API key encryption (64 hex chars, generate with: openssl rand -hex 32)
    API_KEY_ENCRYPTION_KEY_ENV = "API_KEY_ENCRYPTION_KEY"

    # PDF export
    PDF_MAX_CONCURRENT = int(os.getenv("PDF_MAX_CONCURRENT", "2"))
    PDF_TIMEOUT_SECONDS = float(os.getenv("PDF_TIMEOUT_SECONDS", "30"))

    @staticmethod
    def get_postgres_dsn() -> str:
        """Get PostgreSQL DSN with password handling"""
        if Config.POSTGRES_DSN:
            return Config.POSTGRES_DSN
        if Config.DB_PASSWORD:
            password = quote_plus(Config.DB_PASSWORD)
            return f"postgresql://{Config.DB_USER}:{password}@{Config.DB_HOST}:{Config.DB_PORT}/{Config.DB_NAME}"
        return f"postgresql://{Config.DB_USER}@{Config.DB_HOST}:{Config.DB_PORT}/{Config.DB_NAME}"

    @staticmethod
    def get_encryption_key() -> str:
        """Raw encryption key from the environment (read at call time)"""
        return os.getenv(Config.API_KEY_ENCRYPTION_KEY_ENV, "")
