# Filename: mediavault/config.py
from fastapi import Request
from pydantic_settings import BaseSettings, SettingsConfigDict
from pathlib import Path
from typing import List, Literal


def _split(value: str) -> List[str]:
    return [v.strip() for v in value.split(",") if v.strip()]


class Settings(BaseSettings):
    # Core
    debug: bool = False
    app_name: str = "MediaVault"
    app_version: str = "0.1.0"

    host: str = "0.0.0.0"
    port: int = 8000

    # Storage
    storage_path: Path = Path("./uploads")
    public_prefix: str = "/files/uploads"
    max_upload_size_mb: int = 500
    allowed_extensions: str = ".mp4,.webm,.ogg,.mov,.png,.jpg,.jpeg,.pdf"

    # Delivery
    streamable_prefixes: str = "video/"
    stream_chunk_size: int = 64 * 1024
    upload_chunk_size: int = 1024 * 1024

    cors_allow_origins: str = "http://localhost:3000,http://localhost:5173"
    cors_allow_credentials: bool = True
    cors_allow_methods: str = "*"
    cors_allow_headers: str = "*"

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="MEDIAVAULT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_size_mb * 1024 * 1024

    @property
    def extension_allow_list(self) -> List[str]:
        return [e.lower() if e.startswith(".") else f".{e.lower()}" for e in _split(self.allowed_extensions)]

    @property
    def streamable_type_prefixes(self) -> List[str]:
        return _split(self.streamable_prefixes)

    @property
    def cors_origins(self) -> List[str]:
        return ["*"] if self.cors_allow_origins == "*" else _split(self.cors_allow_origins)

    @property
    def cors_methods(self) -> List[str]:
        return ["*"] if self.cors_allow_methods == "*" else _split(self.cors_allow_methods)

    @property
    def cors_headers(self) -> List[str]:
        return ["*"] if self.cors_allow_headers == "*" else _split(self.cors_allow_headers)


settings = Settings()


def get_settings(request: Request) -> Settings:
    """Settings the running app was built with (dependency)."""
    return request.app.state.settings
