from factorynear.config.settings import get_settings
from factorynear.filtering.engine import FilterOptions
from factorynear.features.risk import HIGH_RISK_CATEGORY_CODES
from factorynear.location.sources import PositionOptions


def test_default_settings_carry_the_filter_and_location_knobs():
    settings = get_settings()
    assert settings.filtering.radius_km == 10
    assert settings.filtering.km_per_degree == 111
    assert settings.filtering.display_cap == 20
    assert settings.location.fallback.latitude == 14.0504
    assert settings.location.fallback.longitude == 101.3678
    assert settings.location.timeout_seconds == 10
    assert settings.location.max_cache_age_seconds == 300
    assert settings.location.high_accuracy is True
    assert settings.risk.criteria


def test_configured_risk_codes_match_builtin_set():
    settings = get_settings()
    assert frozenset(settings.risk.category_codes) == HIGH_RISK_CATEGORY_CODES
    assert FilterOptions.from_settings(settings).risk_codes == HIGH_RISK_CATEGORY_CODES


def test_position_options_from_settings():
    options = PositionOptions.from_settings(get_settings())
    assert options == PositionOptions(high_accuracy=True, timeout_seconds=10.0, max_cache_age_seconds=300.0)


def test_env_overrides_are_applied(monkeypatch):
    monkeypatch.setenv("FACTORYNEAR_DATASET_PATH", "/tmp/other.geojson")
    monkeypatch.setenv("FACTORYNEAR_LOCATION_URL", "https://geo.example.test/json")
    monkeypatch.setenv("FACTORYNEAR_LOG_LEVEL", "DEBUG")
    get_settings.cache_clear()
    try:
        settings = get_settings()
        assert settings.dataset.path == "/tmp/other.geojson"
        assert settings.location.source_url == "https://geo.example.test/json"
        assert settings.app.log_level == "DEBUG"
    finally:
        get_settings.cache_clear()


def test_external_config_file(monkeypatch, tmp_path):
    config = tmp_path / "config.yaml"
    config.write_text("filtering:\n  radius_km: 5\n  display_cap: 50\n", encoding="utf-8")
    monkeypatch.setenv("FACTORYNEAR_CONFIG_PATH", str(config))
    get_settings.cache_clear()
    try:
        settings = get_settings()
        assert settings.filtering.radius_km == 5
        assert settings.filtering.display_cap == 50
        # Sections missing from the file keep their model defaults.
        assert settings.location.fallback.latitude == 14.0504
    finally:
        get_settings.cache_clear()
