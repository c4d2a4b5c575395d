from pydantic_settings import BaseSettings
from typing import Optional

# pydantic_settings is not part of the core pydantic package anymore. Since Pydantic v2, the settings functionality has been split out into its own package.
# BaseSettings from pydantic-settings allow values to be pulled from the .env file (by its default), and provide defaults where applicable.

# secrets / urls are Optional here: each caller checks its value at call time and raises ConfigurationError when it is missing.


class Settings(BaseSettings):
    # Supabase (document / row store for synced users)
    SUPABASE_URL: Optional[str] = None
    SUPABASE_KEY: Optional[str] = None

    # Clerk webhook signing secret (whsec_...)
    CLERK_WEBHOOK_SECRET: Optional[str] = None

    # Clerk backend secret key, used to write metadata back to Clerk users
    CLERK_SECRET_KEY: Optional[str] = None

    # API Settings
    API_PREFIX: str = "/api"

    # Logging
    LOG_LEVEL: str = "INFO"

    class Config:
        # priority handling, the order is:
        # 1. System environment variables (highest priority)
        # 2. .env file (if it exists)
        # 3. Default values in the Settings class (lowest priority)

        env_file = ".env"
        case_sensitive = True


# throughout the entire project, no matter how many files do "from app.configs.app_settings import settings"
# this module (and Settings() initialization) only runs once per python process. Everything else uses the cached module and settings instance.
# values are read off this instance at call time (not copied at import), so patching an attribute is enough to change behaviour.
settings = Settings()
