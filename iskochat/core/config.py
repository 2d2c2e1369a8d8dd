from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    STORE_PROVIDER: str | None = None  # "memory" | "json"; json in dev/local when unset
    DATA_DIR: str = "./data/conversations"

    PUSH_ENDPOINT: str | None = None
    PUSH_API_KEY: str | None = None
    PUSH_TIMEOUT_SECONDS: float = 10.0

    AUTO_REPLY_ENABLED: bool = False
    AUTO_REPLY_TEXT: str = "Hello! Thanks for your message. I'll get back to you as soon as possible."

    PRIORITY_RANKING_ENABLED: bool = False
    PRIORITY_PARTICIPANTS: list[str] = []
    FAVOR_ACTIVE_TRANSACTIONS: bool = False

    ADMIN_PARTICIPANTS: list[str] = []  # may approve or dismiss meetup appeals


settings = Settings()
