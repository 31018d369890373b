from dotenv import load_dotenv
load_dotenv()  # Load environment variables from .env file

import os


def _int_env(name, default):
    raw = os.getenv(name)
    if raw is None or str(raw).strip() == "":
        return default
    return int(raw)


class Config:
    """Base configuration class."""
    APP_NAME = os.getenv("APP_NAME", "Social Publisher")

    SECRET_KEY = os.getenv("SECRET_KEY")
    DEBUG = os.getenv("FLASK_DEBUG", "False") == "True"
    TESTING = False

    # ========================================
    # DATASTORE / QUEUE
    # ========================================
    MONGO_URI = os.getenv("MONGO_URI", "mongodb://localhost:27017")
    DB_NAME = os.getenv("DB_NAME", "social_publisher")
    REDIS_HOST = os.getenv("REDIS_HOST", "localhost")
    REDIS_PORT = _int_env("REDIS_PORT", 6379)

    # ========================================
    # PUBLISHING
    # ========================================
    GRAPH_API_VERSION = os.getenv("GRAPH_API_VERSION", "v18.0")
    PUBLISH_HTTP_TIMEOUT = _int_env("PUBLISH_HTTP_TIMEOUT", 30)      # seconds, metadata calls
    PUBLISH_MEDIA_TIMEOUT = _int_env("PUBLISH_MEDIA_TIMEOUT", 120)   # seconds, image transfer
    PUBLISH_VIDEO_TIMEOUT = _int_env("PUBLISH_VIDEO_TIMEOUT", 600)   # seconds, video transfer
    PUBLISH_MAX_WORKERS = _int_env("PUBLISH_MAX_WORKERS", 6)
    PUBLISH_DUE_BATCH_LIMIT = _int_env("PUBLISH_DUE_BATCH_LIMIT", 20)

    # ========================================
    # OAUTH CLIENTS (refresh-token redemption only)
    # ========================================
    FACEBOOK_APP_ID = os.getenv("FACEBOOK_APP_ID")
    FACEBOOK_APP_SECRET = os.getenv("FACEBOOK_APP_SECRET")
    LINKEDIN_CLIENT_ID = os.getenv("LINKEDIN_CLIENT_ID")
    LINKEDIN_CLIENT_SECRET = os.getenv("LINKEDIN_CLIENT_SECRET")
    TWITTER_CLIENT_ID = os.getenv("TWITTER_CLIENT_ID")
    TWITTER_CLIENT_SECRET = os.getenv("TWITTER_CLIENT_SECRET")
    TIKTOK_CLIENT_KEY = os.getenv("TIKTOK_CLIENT_KEY")
    TIKTOK_CLIENT_SECRET = os.getenv("TIKTOK_CLIENT_SECRET")
    YOUTUBE_CLIENT_ID = os.getenv("YOUTUBE_CLIENT_ID")
    YOUTUBE_CLIENT_SECRET = os.getenv("YOUTUBE_CLIENT_SECRET")


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True


class TestingConfig(Config):
    """Testing configuration."""
    DEBUG = False
    TESTING = True
    MONGO_URI = os.getenv("TEST_MONGO_URI", "mongodb://localhost:27017")
    DB_NAME = os.getenv("TEST_DB_NAME", "social_publisher_test")


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False


CONFIG_BY_ENV = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


def load_config(app, overrides=None):
    load_dotenv()
    env = os.getenv("APP_ENV", "development")
    app.config.from_object(CONFIG_BY_ENV.get(env, DevelopmentConfig))
    if overrides:
        app.config.update(overrides)
