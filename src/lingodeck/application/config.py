from pathlib import Path
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from lingodeck.application.snapshot_merge import MergePolicy
from lingodeck.domain.constants import (
    DEFAULT_STORE_NAMESPACE,
    DEFAULT_TARGET_LANGUAGE,
    PASTE_API_URL,
    PASTE_EXPIRY_DAYS,
    REQUEST_TIMEOUT,
)


def config_file_path() -> Path:
    return Path.home() / ".config/lingodeck/config.toml"


class AppConfig(BaseSettings):
    """
    Configuration model for lingodeck.
    Supports loading from:
    1. Config file (~/.config/lingodeck/config.toml)
    2. Environment variables (LINGODECK_*)
    3. Manual overrides (CLI)
    """

    model_config = SettingsConfigDict(
        env_prefix="LINGODECK_",
        extra="ignore",
    )

    # Storage
    data_dir: Path = Field(default_factory=lambda: Path.home() / ".local/share/lingodeck")
    store_namespace: str = DEFAULT_STORE_NAMESPACE

    # Languages
    target_language: str = DEFAULT_TARGET_LANGUAGE

    # Restore
    merge_policy: MergePolicy = MergePolicy.SMART_MERGE

    # Remote snapshots
    paste_api_url: str = PASTE_API_URL
    paste_proxy_url: str | None = None
    paste_expiry_days: int = PASTE_EXPIRY_DAYS
    request_timeout: float = REQUEST_TIMEOUT

    # 0 = warnings only, 1 = info, 2+ = debug
    verbose: int = 0

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        from pydantic_settings import TomlConfigSettingsSource

        # Earlier sources win: CLI > env > config file > defaults
        toml_file = config_file_path()
        if toml_file.exists():
            return (
                init_settings,
                env_settings,
                TomlConfigSettingsSource(settings_cls, toml_file=toml_file),
            )
        return (init_settings, env_settings)

    @field_validator("data_dir", mode="before")
    @classmethod
    def resolve_data_dir(cls, v: Any) -> Path:
        return Path(v).expanduser().resolve()


def resolve_config(cli_overrides: dict[str, Any] | None = None) -> AppConfig:
    """
    Multi-layered configuration resolution.
    1. Defaults in AppConfig
    2. ~/.config/lingodeck/config.toml (if exists)
    3. Environment variables (LINGODECK_*)
    4. cli_overrides (None values are ignored so unset CLI flags fall through)
    """
    overrides = {k: v for k, v in (cli_overrides or {}).items() if v is not None}
    return AppConfig(**overrides)
