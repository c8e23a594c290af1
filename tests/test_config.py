import pytest

from demandscan.core.config.loader import DEFAULT_APP_YAML, load_app_config, validate_app_config_file
from demandscan.core.config.models import LeadStatus
from demandscan.core.errors import ConfigError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.delenv("RESEND_API_KEY", raising=False)


def test_missing_file_gives_defaults(tmp_path):
    config = load_app_config(tmp_path / "absent.yaml")

    assert config.crawler.rate_limit_ms == 3000
    assert config.crawler.timeout_seconds == 30
    assert config.detection.score_per_match == 15
    assert config.notifications.email.api_key is None


def test_default_template_loads(tmp_path):
    path = tmp_path / "app.yaml"
    path.write_text(DEFAULT_APP_YAML, encoding="utf-8")

    config = load_app_config(path)

    assert config.database.url == "sqlite:///data/demandscan.db"
    assert config.notifications.email.api_key is None
    assert validate_app_config_file(path) == []


def test_env_overrides(tmp_path, monkeypatch):
    path = tmp_path / "app.yaml"
    path.write_text(DEFAULT_APP_YAML, encoding="utf-8")
    monkeypatch.setenv("DATABASE_URL", "sqlite:///other.db")
    monkeypatch.setenv("RESEND_API_KEY", "re_live")

    config = load_app_config(path)

    assert config.database.url == "sqlite:///other.db"
    assert config.notifications.email.api_key == "re_live"


def test_robots_token_lowercased(tmp_path):
    path = tmp_path / "app.yaml"
    path.write_text("crawler:\n  robots_agent_token: DemandScan\n", encoding="utf-8")

    assert load_app_config(path).crawler.robots_agent_token == "demandscan"


def test_invalid_values_raise(tmp_path):
    path = tmp_path / "app.yaml"
    path.write_text("crawler:\n  rate_limit_ms: -5\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_app_config(path)
    assert validate_app_config_file(path)


def test_invalid_yaml_raises(tmp_path):
    path = tmp_path / "app.yaml"
    path.write_text("crawler: [unclosed", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_app_config(path)


def test_lead_status_transitions():
    assert LeadStatus.NEW.can_transition_to(LeadStatus.CONTACTED)
    assert LeadStatus.CONTACTED.can_transition_to(LeadStatus.CONVERTED)
    assert not LeadStatus.NEW.can_transition_to(LeadStatus.CONVERTED)
    assert not LeadStatus.DISMISSED.can_transition_to(LeadStatus.NEW)
