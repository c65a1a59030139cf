"""
Tests for pydantic-settings configuration.
"""
import pytest
from pydantic import ValidationError

from biomine.core.settings import Settings, _cached_settings, get_settings


@pytest.fixture
def clean_env(monkeypatch):
    """Remove settings variables that may leak in from the environment."""
    for name in (
        "DATABASE_URL",
        "DB_SCHEMA",
        "FLANKING_DISTANCES",
        "FLANKING_DIRECTIONS",
        "FLANKING_INCLUDE_GENE",
        "ONTOLOGY_PARENT_PREFIXES",
        "BATCH_SIZE",
    ):
        monkeypatch.delenv(name, raising=False)
    yield monkeypatch
    _cached_settings.cache_clear()


class TestSettingsDefaults:
    """Tests for default values."""

    def test_defaults(self, clean_env):
        settings = Settings(_env_file=None)

        assert settings.database_url is None
        assert settings.db_schema is None
        assert settings.flanking_distances == [0.5]
        assert settings.flanking_directions == ["upstream", "downstream"]
        assert settings.flanking_include_gene == [False]
        assert settings.ontology_parent_prefixes == []
        assert settings.batch_size == 1000


class TestSettingsFromEnvironment:
    """Tests for environment parsing and validation."""

    def test_json_lists(self, clean_env):
        """List settings are read as JSON."""
        clean_env.setenv("DATABASE_URL", "sqlite:///warehouse.db")
        clean_env.setenv("FLANKING_DISTANCES", "[0.5, 1.0, 5.0]")
        clean_env.setenv("FLANKING_DIRECTIONS", '["upstream"]')
        clean_env.setenv("FLANKING_INCLUDE_GENE", "[false, true]")

        settings = Settings(_env_file=None)

        assert settings.database_url == "sqlite:///warehouse.db"
        assert settings.flanking_distances == [0.5, 1.0, 5.0]
        assert settings.flanking_directions == ["upstream"]
        assert settings.flanking_include_gene == [False, True]

    def test_invalid_direction(self, clean_env):
        clean_env.setenv("FLANKING_DIRECTIONS", '["sideways"]')
        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_non_positive_distance(self, clean_env):
        clean_env.setenv("FLANKING_DISTANCES", "[0.0]")
        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    @pytest.mark.parametrize(
        "name",
        ["FLANKING_DISTANCES", "FLANKING_DIRECTIONS", "FLANKING_INCLUDE_GENE"],
    )
    def test_empty_flanking_list(self, clean_env, name):
        """Flanking lists need at least one value."""
        clean_env.setenv(name, "[]")
        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_prefixes_normalised(self, clean_env):
        clean_env.setenv("ONTOLOGY_PARENT_PREFIXES", '["to:", "po"]')
        assert Settings(_env_file=None).ontology_parent_prefixes == ["TO", "PO"]

    def test_batch_size_positive(self, clean_env):
        clean_env.setenv("BATCH_SIZE", "0")
        with pytest.raises(ValidationError):
            Settings(_env_file=None)


class TestGetSettings:
    """Tests for the cached settings accessor."""

    def test_cached(self, clean_env):
        assert get_settings(reload=True) is get_settings()

    def test_reload(self, clean_env):
        get_settings(reload=True)
        clean_env.setenv("DB_SCHEMA", "LEGUME")

        assert get_settings(reload=True).db_schema == "LEGUME"
