from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="A11Y_",
        extra="ignore"
    )

    memory_session_key: str = "adaptive_engine_memory"
    sqlite_path: Optional[str] = None  # None keeps memory in-process only
    confirmation_timeout: float = 15.0
    speak_prompts: bool = True         # narrate the dialog message on proposal
    speak_outcomes: bool = True        # short spoken notice after accept/reject
    log_level: str = "INFO"


settings = Settings()
