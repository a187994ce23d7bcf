"""Runtime configuration for Routle."""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_MAPS_PATH = Path(__file__).parent / "data" / "maps.json"


class Settings(BaseSettings):
    """Environment-driven runtime settings."""

    model_config = SettingsConfigDict(env_prefix="ROUTLE_", env_file=".env", extra="ignore")

    app_name: str = "routle"
    log_level: str = "INFO"
    maps_path: Path = DEFAULT_MAPS_PATH
    geocoder_backend: str = Field(
        default="geonames",
        description="City lookup backend: 'geonames' for the GeoNames web API, 'static' for the bundled gazetteer.",
    )
    geonames_username: str = "demo"
    geonames_base_url: str = "http://api.geonames.org"
    geocoder_timeout_seconds: float = 8.0
    geocoder_max_rows: int = 10
    sample_max_rows: int = 500
    separation_max_attempts: int = 100
    viewport_width: int = Field(default=800, gt=0)
    viewport_height: int = Field(default=600, gt=0)
    telemetry_enabled: bool = True


settings = Settings()
