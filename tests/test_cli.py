import pytest
from typer.testing import CliRunner

from demandscan.cli.main import app
from demandscan.persistence.db import dispose_engines, get_session
from demandscan.persistence.models import AlertSettings, Keyword, Source, UserRole

runner = CliRunner()


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'cli.db'}")
    monkeypatch.delenv("RESEND_API_KEY", raising=False)
    dispose_engines()
    result = runner.invoke(app, ["init"])
    assert result.exit_code == 0, result.output
    yield tmp_path
    dispose_engines()


def test_version():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert "demandscan" in result.output


def test_init_writes_config(workdir):
    assert (workdir / "configs" / "app.yaml").exists()
    assert (workdir / "cli.db").exists()


def test_sources_lifecycle(workdir):
    result = runner.invoke(app, ["sources", "add", "Board", "https://board.example/wanted", "--type", "forum"])
    assert result.exit_code == 0, result.output

    with get_session() as session:
        source = session.query(Source).one()
        source_id = source.id
        assert source.source_type == "forum"
        assert source.active

    assert runner.invoke(app, ["sources", "disable", source_id]).exit_code == 0
    with get_session() as session:
        assert session.get(Source, source_id).active is False

    result = runner.invoke(app, ["sources", "remove", source_id, "--yes"])
    assert result.exit_code == 0
    with get_session() as session:
        assert session.query(Source).count() == 0


def test_sources_add_rejects_bad_url(workdir):
    result = runner.invoke(app, ["sources", "add", "Board", "ftp://board.example"])
    assert result.exit_code == 1


def test_keywords_add(workdir):
    result = runner.invoke(app, ["keywords", "add", "product", "solar panel", "inverter"])
    assert result.exit_code == 0, result.output

    with get_session() as session:
        rows = session.query(Keyword).all()
        assert sorted(k.keyword for k in rows) == ["inverter", "solar panel"]
        assert {k.category for k in rows} == {"product"}


def test_admin_and_alert_settings(workdir):
    assert runner.invoke(app, ["admins", "add", "admin-1"]).exit_code == 0
    assert runner.invoke(app, ["admins", "add", "admin-1"]).exit_code == 0
    result = runner.invoke(
        app,
        ["alerts", "set", "admin-1", "--whatsapp", "--whatsapp-number", "+2348012345678", "--no-in-app"],
    )
    assert result.exit_code == 0, result.output

    with get_session() as session:
        assert session.query(UserRole).count() == 1
        settings = session.query(AlertSettings).filter_by(user_id="admin-1").one()
        assert settings.whatsapp_enabled
        assert settings.whatsapp_number == "+2348012345678"
        assert settings.in_app_enabled is False
        assert settings.email_enabled is False


def test_crawl_with_no_sources(workdir):
    result = runner.invoke(app, ["crawl", "run"])
    assert result.exit_code == 0, result.output
    assert "No active sources" in result.output


def test_detect_with_no_keywords(workdir):
    result = runner.invoke(app, ["detect", "run"])
    assert result.exit_code == 0, result.output
    assert "No keywords configured" in result.output


def test_lead_status_unknown_lead(workdir):
    result = runner.invoke(app, ["leads", "status", "missing", "contacted"])
    assert result.exit_code == 1


def test_status(workdir):
    result = runner.invoke(app, ["status"])
    assert result.exit_code == 0, result.output
    assert "No leads detected yet" in result.output
