from pydantic import model_validator
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # OpenAI
    openai_api_key: str = ""
    # chat_model: str = "gpt-4o-mini"
    chat_model: str = "gpt-4.1-mini"  # Cheap and fast enough for short grounded answers
    chat_temperature: float = 0.2
    chat_max_output_tokens: int = 1024
    completion_timeout_seconds: float = 30.0

    # Lesson content
    content_dir: str = "content"
    content_cache_enabled: bool = False
    content_cache_ttl_seconds: float = 60.0

    # Retrieval
    chunk_size: int = 900
    chunk_overlap: int = 120
    retrieval_top_k: int = 6

    # URLs
    frontend_url: str = "http://localhost:3000"

    # Logging
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = False

    @model_validator(mode="after")
    def check_chunking(self) -> "Settings":
        # Same rule the chunker enforces; checked here so a bad deploy fails on start-up
        if self.chunk_size <= 0:
            raise ValueError("chunk_size must be > 0")
        if not 0 <= self.chunk_overlap < self.chunk_size:
            raise ValueError("chunk_overlap must be >= 0 and < chunk_size")
        return self


@lru_cache()
def get_settings() -> Settings:
    return Settings()
