import os
from typing import Optional
from dotenv import load_dotenv

load_dotenv()

class Settings:
    ENV: str = os.getenv("ENV", "local")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    STORAGE_BACKEND: str = os.getenv("STORAGE_BACKEND", "local")
    EMAIL_BACKEND: str = os.getenv("EMAIL_BACKEND", "console")

    # Database
    DATABASE_URL: Optional[str] = os.getenv("DATABASE_URL")
    DATABASE_ECHO: bool = os.getenv("DATABASE_ECHO", "False").lower() == "true"
    DATABASE_POOL_SIZE: int = int(os.getenv("DATABASE_POOL_SIZE", 20))
    DATABASE_MAX_OVERFLOW: int = int(os.getenv("DATABASE_MAX_OVERFLOW", 10))

    # JWT / Security
    SECRET_KEY: str = os.getenv("SECRET_KEY")
    ALGORITHM: str = os.getenv("ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", 30))
    REFRESH_TOKEN_EXPIRE_DAYS: int = int(os.getenv("REFRESH_TOKEN_EXPIRE_DAYS", 30))
    SET_PASSWORD_TOKEN_EXPIRE_DAYS: int = int(os.getenv("SET_PASSWORD_TOKEN_EXPIRE_DAYS", 2))
    VERIFY_EMAIL_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("VERIFY_EMAIL_TOKEN_EXPIRE_MINUTES", 60))

    # App identity / email
    APP_NAME: str = os.getenv("APP_NAME", "Health Camp")
    SENDER_NAME: str = os.getenv("SENDER_NAME", "Health Camp Team")
    EMAIL_FROM: Optional[str] = os.getenv("EMAIL_FROM")

    SMTP_HOST: Optional[str] = os.getenv("SMTP_HOST")
    SMTP_PORT: Optional[int] = int(os.getenv("SMTP_PORT", 587))
    SMTP_USER: Optional[str] = os.getenv("SMTP_USER")
    SMTP_PASSWORD: Optional[str] = os.getenv("SMTP_PASSWORD")

    SUPERADMIN_EMAIL: Optional[str] = os.getenv("SUPERADMIN_EMAIL")

    # Frontend URLs
    CLIENT_DOMAIN: str = os.getenv("CLIENT_DOMAIN", "http://localhost:3000")

    # File storage
    UPLOAD_DIR: str = os.getenv("UPLOAD_DIR", "uploads")
    MAX_UPLOAD_SIZE_MB: int = int(os.getenv("MAX_UPLOAD_SIZE_MB", 5))
    AWS_S3_BUCKET: str = os.getenv("AWS_S3_BUCKET")
    AWS_REGION: str = os.getenv("AWS_REGION")
    AWS_ACCESS_KEY_ID: Optional[str] = os.getenv("AWS_ACCESS_KEY_ID")
    AWS_SECRET_ACCESS_KEY: Optional[str] = os.getenv("AWS_SECRET_ACCESS_KEY")
    AWS_PRESIGNED_URL_EXPIRY: int = int(os.getenv("AWS_PRESIGNED_URL_EXPIRY", 3600))

    # CORS
    BACKEND_CORS_ORIGINS: Optional[str] = os.getenv("BACKEND_CORS_ORIGINS",)

    # Rate Limiting
    RATE_LIMIT_ENABLED: bool = os.getenv("RATE_LIMIT_ENABLED", "True").lower() == "true"
    RATE_LIMIT_REQUESTS: int = int(os.getenv("RATE_LIMIT_REQUESTS", 100))
    RATE_LIMIT_PERIOD_SECONDS: int = int(os.getenv("RATE_LIMIT_PERIOD_SECONDS", 60))

    # Redis
    REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379/0")
    CACHE_ENABLED: bool = os.getenv("CACHE_ENABLED", "True").lower() == "true"
    CACHE_TTL_SECONDS: int = int(os.getenv("CACHE_TTL_SECONDS", 300))

    # Celery
    CELERY_BROKER_URL: str = os.getenv("CELERY_BROKER_URL", os.getenv("REDIS_URL", "redis://localhost:6379/0"))
    CELERY_RESULT_BACKEND: Optional[str] = os.getenv("CELERY_RESULT_BACKEND")
    CELERY_TASK_ALWAYS_EAGER: bool = os.getenv("CELERY_TASK_ALWAYS_EAGER", "False").lower() == "true"

    # WhatsApp Business (Cloud API)
    WA_API_URL: str = os.getenv("WA_API_URL", "https://graph.facebook.com/v19.0")
    WA_PHONE_NUMBER_ID: Optional[str] = os.getenv("WA_PHONE_NUMBER_ID")
    WA_ACCESS_TOKEN: Optional[str] = os.getenv("WA_ACCESS_TOKEN")
    WA_TEMPLATE_LANGUAGE: str = os.getenv("WA_TEMPLATE_LANGUAGE", "en_US")
    WA_TIMEOUT_SECONDS: float = float(os.getenv("WA_TIMEOUT_SECONDS", 15))



settings = Settings()
