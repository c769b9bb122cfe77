import pytest

from opdnd.config import Settings, clean
from opdnd.errors import ValidationError


def test_defaults():
    settings = Settings.from_env({})
    assert settings.store == "sqlite"
    assert settings.db_path == "opdnd.db"
    assert settings.dm_pin == "5637"
    assert settings.persist_retries == 3
    assert settings.persist_backoff == 0.2


@pytest.mark.parametrize("raw", ['"https://x.supabase.co"', "“https://x.supabase.co”", "  'https://x.supabase.co' "])
def test_clean_strips_quotes(raw):
    assert clean(raw) == "https://x.supabase.co"


def test_rest_settings_with_fallback_names():
    settings = Settings.from_env(
        {
            "OPDND_STORE": "REST",
            "NEXT_PUBLIC_SUPABASE_URL": '"https://x.supabase.co"',
            "NEXT_PUBLIC_SUPABASE_ANON_KEY": "key",
            "OPDND_PERSIST_RETRIES": "5",
        }
    )
    assert settings.store == "rest"
    assert settings.rest_url == "https://x.supabase.co"
    assert settings.rest_key == "key"
    assert settings.persist_retries == 5


def test_primary_names_win():
    settings = Settings.from_env(
        {"SUPABASE_URL": "https://a.co", "VITE_SUPABASE_URL": "https://b.co", "SUPABASE_ANON_KEY": "k"}
    )
    assert settings.rest_url == "https://a.co"


@pytest.mark.parametrize(
    "env",
    [
        {"OPDND_STORE": "mongo"},
        {"OPDND_STORE": "rest", "SUPABASE_URL": "x.supabase.co", "SUPABASE_ANON_KEY": "k"},
        {"OPDND_STORE": "rest", "SUPABASE_URL": "https://x.supabase.co"},
        {"OPDND_PERSIST_RETRIES": "many"},
        {"OPDND_PERSIST_RETRIES": "0"},
    ],
)
def test_invalid_settings(env):
    with pytest.raises(ValidationError):
        Settings.from_env(env)
