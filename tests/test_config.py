# tests/test_config.py
import pytest

from wasi_listings.config.settings import ConfigurationError, ScraperConfig, Settings


class TestScraperConfig:
    def test_defaults(self):
        config = ScraperConfig()
        assert config.timeout == 15
        assert config.max_images == 20
        assert config.max_description_length == 1000
        assert config.default_location == "Caracas"
        assert (config.room_count_min, config.room_count_max) == (1, 19)
        assert "Mozilla" in config.user_agent

    @pytest.mark.parametrize("kwargs", [
        {"room_count_min": 5, "room_count_max": 2},
        {"timeout": 0},
        {"max_concurrency": 0},
        {"default_location": ""},
    ])
    def test_invalid_values(self, kwargs):
        with pytest.raises(ConfigurationError):
            ScraperConfig(**kwargs)

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("WASI_TIMEOUT", "30")
        monkeypatch.setenv("WASI_USER_AGENT", "ListingBot/1.0")
        monkeypatch.setenv("WASI_DEFAULT_LOCATION", "Maracaibo")
        monkeypatch.setenv("WASI_MAX_CONCURRENCY", "6")

        config = ScraperConfig.from_env()

        assert config.timeout == 30
        assert config.user_agent == "ListingBot/1.0"
        assert config.default_location == "Maracaibo"
        assert config.max_concurrency == 6

    def test_non_integer_env(self, monkeypatch):
        monkeypatch.setenv("WASI_TIMEOUT", "quince")
        with pytest.raises(ConfigurationError, match="WASI_TIMEOUT"):
            ScraperConfig.from_env()


class TestSettings:
    def test_environment_name(self, monkeypatch):
        monkeypatch.setenv("APP_ENV", "staging")
        assert Settings().env == "staging"
        assert Settings("production").env == "production"

    def test_yaml_overrides(self, tmp_path):
        (tmp_path / "testing.yaml").write_text(
            "scraper:\n"
            "  timeout: 5\n"
            "  default_location: Valencia\n"
            "logging:\n"
            "  level: DEBUG\n",
            encoding="utf-8",
        )
        config = Settings("testing")
        config.config_dir = tmp_path
        config._load_env_settings()

        assert config.scraper.timeout == 5
        assert config.scraper.default_location == "Valencia"
        assert config.logging.level == "DEBUG"

    def test_unknown_yaml_key(self, tmp_path):
        (tmp_path / "testing.yaml").write_text("scraper:\n  retries: 3\n", encoding="utf-8")
        config = Settings("testing")
        config.config_dir = tmp_path

        with pytest.raises(ConfigurationError, match="Invalid settings"):
            config._load_env_settings()
