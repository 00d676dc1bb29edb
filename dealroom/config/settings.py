"""Application configuration settings"""

import os
from dotenv import load_dotenv

load_dotenv()


class Config:
    TESTING = os.getenv("TESTING", "false").lower() in {"1", "true", "yes", "on"}
    DEBUG = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes", "on"}

    # Server
    HOST = os.getenv("HOST", "0.0.0.0")
    PORT = int(os.getenv("PORT", "8000"))
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*").split(",")

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_PATH = os.getenv("LOG_PATH", "")
    LOG_FORMAT = os.getenv(
        "LOG_FORMAT",
        "%(asctime)s %(levelname)s [%(correlation_id)s] %(name)s: %(message)s",
    )

    # Assistant (EVA)
    # One suspension point per reply; 0 delivers on the next loop iteration
    ASSISTANT_REPLY_DELAY_SECONDS: float = float(
        os.getenv("ASSISTANT_REPLY_DELAY_SECONDS", "1.0")
    )

    # Lender matching
    LENDER_MATCH_LIMIT: int = int(os.getenv("LENDER_MATCH_LIMIT", "3"))

    # Worklist
    CONVERSATION_LIST_LIMIT: int = int(os.getenv("CONVERSATION_LIST_LIMIT", "50"))

    # Redis settings (empty URL keeps conversations in memory)
    REDIS_URL: str = os.getenv("REDIS_URL", "")
    REDIS_KEY_PREFIX: str = os.getenv("REDIS_KEY_PREFIX", "dealroom:")

    # Customer directory (empty URL uses the in-memory directory)
    CUSTOMER_DIRECTORY_URL: str = os.getenv("CUSTOMER_DIRECTORY_URL", "")
    CUSTOMER_DIRECTORY_TIMEOUT: float = float(
        os.getenv("CUSTOMER_DIRECTORY_TIMEOUT", "5.0")
    )
    CUSTOMER_DIRECTORY_TOKEN: str = os.getenv("CUSTOMER_DIRECTORY_TOKEN", "")

    # File upload
    UPLOAD_BASE = os.getenv("UPLOAD_BASE", "uploads")
    UPLOAD_PUBLIC_BASE = os.getenv("UPLOAD_PUBLIC_BASE", "/files")
    MAX_UPLOAD_MB = float(os.getenv("MAX_UPLOAD_MB", "25"))
    MAX_CONTENT_LENGTH = int(MAX_UPLOAD_MB * 1024 * 1024)

    # Service auth
    SERVICE_AUTH_SECRET = os.getenv("SERVICE_AUTH_SECRET", "")
    SERVICE_AUTH_ISSUER = os.getenv("SERVICE_AUTH_ISSUER", "dealroom_host")
    SERVICE_AUTH_AUDIENCE = os.getenv("SERVICE_AUTH_AUDIENCE", "dealroom")


class DevelopmentConfig(Config):
    """Development configuration"""

    DEBUG = True


class TestingConfig(Config):
    """Testing configuration"""

    TESTING = True
    ASSISTANT_REPLY_DELAY_SECONDS = 0.0
    REDIS_URL = ""
    CUSTOMER_DIRECTORY_URL = ""


class ProductionConfig(Config):
    """Production configuration"""

    pass


# Configuration dictionary
config = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
    "default": DevelopmentConfig,
}


def get_config(env=None):
    """Get configuration based on environment"""
    if env is None:
        env = os.getenv("DEALROOM_ENV", "development")
    return config.get(env, config["default"])
