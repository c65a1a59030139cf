from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

VALID_DIRECTIONS = ("upstream", "downstream")


class Settings(BaseSettings):
    """Postprocessing settings.

    Required at run time:
      - DATABASE_URL

    Optional:
      - DB_SCHEMA: schema the warehouse tables live in; applied through the
        engine's schema translate map
      - FLANKING_DISTANCES / FLANKING_DIRECTIONS / FLANKING_INCLUDE_GENE:
        JSON lists, e.g. FLANKING_DISTANCES='[0.5, 1.0, 5.0]'
      - ONTOLOGY_PARENT_PREFIXES: JSON list of term prefixes, e.g. '["TO"]'
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    database_url: Optional[str] = None
    db_schema: Optional[str] = None
    sql_echo: bool = False

    # Gene flanking regions
    flanking_distances: list[float] = Field(
        default_factory=lambda: [0.5],
        min_length=1,
        description="Flanking region sizes in kilobases",
    )
    flanking_directions: list[str] = Field(
        default_factory=lambda: list(VALID_DIRECTIONS),
        min_length=1,
    )
    flanking_include_gene: list[bool] = Field(
        default_factory=lambda: [False],
        min_length=1,
        description="Whether a region also spans the gene body",
    )

    # Ontology parent annotations; empty means every prefix
    ontology_parent_prefixes: list[str] = Field(default_factory=list)

    batch_size: int = Field(default=1000, gt=0)

    # Logging and notification
    log_dir: Optional[str] = None
    log_level: str = "INFO"
    curator_email: str = ""

    @field_validator("flanking_distances")
    @classmethod
    def _check_distances(cls, value: list[float]) -> list[float]:
        for distance in value:
            if distance <= 0:
                raise ValueError(f"Flanking distance must be positive, got {distance}")
        return value

    @field_validator("flanking_directions")
    @classmethod
    def _check_directions(cls, value: list[str]) -> list[str]:
        for direction in value:
            if direction not in VALID_DIRECTIONS:
                raise ValueError(
                    f"Unknown flanking direction '{direction}', "
                    f"expected one of {', '.join(VALID_DIRECTIONS)}"
                )
        return value

    @field_validator("ontology_parent_prefixes")
    @classmethod
    def _strip_prefixes(cls, value: list[str]) -> list[str]:
        return [prefix.rstrip(":").upper() for prefix in value if prefix.strip()]


@lru_cache(maxsize=1)
def _cached_settings() -> Settings:
    return Settings()


def get_settings(reload: bool = False) -> Settings:
    """Return the process-wide settings, re-reading the environment if asked."""
    if reload:
        _cached_settings.cache_clear()
    return _cached_settings()
