from identity_gate.config import Settings


def test_redirect_urls_join_site_and_paths():
    settings = Settings(site_url="https://site.example/", _env_file=None)

    assert settings.confirm_redirect_url == "https://site.example/pages/confirm-email.html"
    assert settings.reset_redirect_url == "https://site.example/pages/reset-password.html"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("SUPABASE_URL", "https://project.supabase.co")
    monkeypatch.setenv("REGISTRATION_DOMAIN", "org.example")
    monkeypatch.setenv("PASSWORD_MIN_LENGTH", "10")

    settings = Settings(_env_file=None)

    assert settings.supabase_url == "https://project.supabase.co"
    assert settings.registration_domain == "org.example"
    assert settings.password_min_length == 10


def test_cors_origins_list():
    settings = Settings(cors_origins="https://a.example, https://b.example", _env_file=None)

    assert settings.cors_origins_list == ["https://a.example", "https://b.example"]
