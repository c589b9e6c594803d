from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"
    database_url: str = ""
    cors_origins: list[str] = ["*"]
    log_level: str = "INFO"

    confidence_threshold: float = 0.6
    min_messages_for_extraction: int = 2
    case_file_assistant_turns: int = 6
    max_document_chars: int = 20000

    model_config = {"env_file": ".env"}


settings = Settings()
