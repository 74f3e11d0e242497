from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = "INFO"

    report_kind: str = "Medical_Report"
    report_title: str = "Medical Report"
    brand_name: str = "ArogyaBridge"
    verification_url: str = "https://arogya-bridge.vercel.app"

    logo_url: str | None = (
        "https://upload.wikimedia.org/wikipedia/commons/thumb/5/5b/"
        "Star_of_life2.svg/640px-Star_of_life2.svg.png"
    )
    logo_timeout_seconds: float = 10.0
    logo_scale: float = 0.15

    # TTF overrides; standard Helvetica faces are used when unset or unreadable.
    pdf_font_regular_path: str | None = None
    pdf_font_bold_path: str | None = None
    pdf_font_italic_path: str | None = None

    storage_backend: str = "local"
    storage_root: str = "storage/reports"
    storage_bucket: str | None = None
    storage_prefix: str | None = "reports"
    pinata_jwt: str | None = None
    pinata_api_url: str = "https://api.pinata.cloud/pinning/pinFileToIPFS"
    upload_timeout_seconds: float = 30.0


settings = Settings()
