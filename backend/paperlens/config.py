from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Application
    app_name: str = "PaperLens Ingestion Service"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"

    # Document ingestion limits
    max_file_size_mb: int = 100
    max_pages: int = 100
    page_batch_size: int = 5
    batch_pause_seconds: float = 0.01
    extraction_timeout_seconds: float = 0.0  # 0 disables the per-document budget

    # Structure analysis
    section_scan_lines: int = 50
    max_section_headers: int = 15

    # PDF loader resource configuration
    pdf_password: str = ""
    pdf_unicode_norm: str | None = None
    pdf_layout_analysis: bool = False

    # Frontend
    frontend_url: str = "http://localhost:3000"


settings = Settings()
