from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    app_name: str = "Resume Insight"
    port: int = 8000
    debug: bool = False
    max_upload_bytes: int = 10 * 1024 * 1024

    github_api_base: str = "https://api.github.com"
    github_token: str | None = None
    github_user_agent: str = "ai-resume-helper"
    github_timeout: float = 15.0
    default_repo_limit: int = 6
    max_repo_limit: int = 10
    max_activity_items: int = 8
    readme_excerpt_chars: int = 500


settings = Settings()
