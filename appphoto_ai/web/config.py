"""Web configuration for AppPhoto AI."""


class Config:
    """Base configuration."""

    # App settings
    DEBUG = True
    TESTING = False

    # CORS settings
    CORS_ORIGINS = [
        "http://localhost:5173",  # Vite dev server
        "http://localhost:3000",  # Alternative dev port
    ]

    # Upload settings (advisory ceiling for document images)
    MAX_CONTENT_LENGTH = 10 * 1024 * 1024  # 10MB

    # View settings
    EXPORT_FILENAME = "appphoto_data.xlsx"


class DevelopmentConfig(Config):
    """Development configuration."""

    DEBUG = True


class ProductionConfig(Config):
    """Production configuration."""

    DEBUG = False


class TestingConfig(Config):
    """Test configuration."""

    DEBUG = False
    TESTING = True


# Config factory
def get_config(env: str = "development") -> Config:
    """Get configuration based on environment.

    Args:
        env: Environment name (development, production, testing)

    Returns:
        Configuration object
    """
    configs = {
        "development": DevelopmentConfig,
        "production": ProductionConfig,
        "testing": TestingConfig,
    }
    return configs.get(env, DevelopmentConfig)()
