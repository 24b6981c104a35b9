"""Application configuration and settings management."""

from typing import Annotated, Any, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="AQUAMAP_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "AquaMap Route Render API"
    api_prefix: str = "/api"
    routing_base_url: Optional[str] = Field(
        default=None,
        description="Base URL of the water-supply routing backend (e.g., http://localhost:8080).",
    )
    routing_max_retries: int = Field(default=3, ge=0)
    routing_backoff_seconds: float = Field(default=1.0, ge=0.0)
    routing_timeout_seconds: float = Field(default=15.0, gt=0.0)
    max_connections_per_report: int = Field(
        default=5,
        ge=1,
        description="How many nearest water supplies are connected to each report.",
    )
    min_zoom: float = Field(default=8.0, ge=0.0)
    max_zoom: float = Field(default=18.0, ge=0.0)
    initial_zoom: float = Field(default=13.0, ge=0.0)
    entity_zoom: float = Field(default=15.0, ge=0.0, description="Zoom used when centering on a single entity.")
    zoom_step: float = Field(default=1.0, gt=0.0)
    marker_budget_tiers: Annotated[tuple[tuple[float, int], ...], NoDecode] = Field(
        default=((15.0, 25), (13.0, 15)),
        description="(minimum zoom, visible destination markers) pairs, e.g. '15:25,13:15'.",
    )
    min_marker_budget: int = Field(default=10, ge=0, description="Budget below the lowest zoom tier.")
    bounds_padding_fraction: float = Field(default=0.1, ge=0.0)
    fallback_bounds_delta: float = Field(default=0.01, gt=0.0, description="Half-size in degrees (~1km).")
    default_center: Annotated[tuple[float, float], NoDecode] = Field(
        default=(3.1390, 101.6869),
        description="Camera center when there is nothing to fit (latitude, longitude).",
    )
    podium_ranks: int = Field(
        default=0,
        ge=0,
        le=3,
        description="Number of top ranked routes that carry a gold/silver/bronze badge.",
    )
    average_speed_kmh: float = Field(default=40.0, gt=0.0)
    frontend_allowed_origins: Annotated[tuple[str, ...], NoDecode] = Field(
        default=(
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()

    @field_validator("marker_budget_tiers", mode="before")
    @classmethod
    def _parse_tiers_from_env(cls, value: Any) -> tuple[tuple[float, int], ...]:
        """Parse zoom tiers from 'zoom:budget' pairs or a JSON array of pairs."""
        if isinstance(value, str):
            text = value.strip()
            try:
                parsed = json.loads(text)
            except (json.JSONDecodeError, TypeError):
                parsed = None
            if not isinstance(parsed, list):
                parsed = [item.split(":", 1) for item in text.split(",") if item.strip()]
            value = parsed
        tiers: list[tuple[float, int]] = []
        for item in value or ():
            if len(item) != 2:
                raise ValueError(f"Invalid marker budget tier '{item}', expected (zoom, budget)")
            tiers.append((float(item[0]), int(item[1])))
        # highest zoom first so the first matching tier wins
        return tuple(sorted(tiers, key=lambda tier: tier[0], reverse=True))

    @field_validator("default_center", mode="before")
    @classmethod
    def _parse_center_from_env(cls, value: Any) -> tuple[float, float]:
        if isinstance(value, str):
            try:
                parsed = json.loads(value)
            except (json.JSONDecodeError, TypeError):
                parsed = value.split(",")
            value = parsed
        lat, lon = value
        return (float(lat), float(lon))


settings = Settings()
