from pathlib import Path

from chamados.core.config import Settings, get_settings


def test_defaults_match_single_account_setup():
    settings = Settings()

    assert settings.login_email == "suporte@netcom.com"
    assert settings.token_lifetime_days == 9999
    assert settings.images_dir == Path("assets") / "images"
    assert settings.report_filename == "relatorio_chamados.pdf"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("SECRET_KEY", "from-env")
    monkeypatch.setenv("BUSINESS_TIMEZONE", "America/Sao_Paulo")
    monkeypatch.setenv("ASSETS_DIR", "/srv/assets")

    settings = Settings()

    assert settings.secret_key == "from-env"
    assert settings.business_timezone == "America/Sao_Paulo"
    assert settings.images_dir == Path("/srv/assets/images")


def test_get_settings_is_cached():
    assert get_settings() is get_settings()
