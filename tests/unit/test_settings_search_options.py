import pytest

from directory_search.constants.directory import DIRECTORY_COLUMNS
from directory_search.settings import Settings


@pytest.mark.unit
def test_settings_defaults_for_search_and_directory() -> None:
    settings = Settings.load()
    config = settings.to_flask_config()

    assert config["USER_SEARCH_ENABLED"] is True
    assert config["USER_SEARCH_MIN_TRUST_LEVEL"] == 0
    assert config["USER_SEARCH_FIELD_NAMES"] == {
        "gender": "Gender",
        "country": "Country",
        "listen": "Listen",
        "share": "Share",
    }
    assert config["DIRECTORY_PAGE_SIZE"] == 50
    assert config["DIRECTORY_ACTIVE_COLUMNS"] == DIRECTORY_COLUMNS


@pytest.mark.unit
def test_settings_parses_directory_columns_csv(monkeypatch) -> None:
    monkeypatch.setenv("DIRECTORY_ACTIVE_COLUMNS", "post_count, likes_received")

    settings = Settings.load()

    # 按统计列的固定顺序输出
    assert settings.resolved_directory_columns == ("likes_received", "post_count")


@pytest.mark.unit
@pytest.mark.parametrize(
    ("name", "value", "message"),
    [
        ("USER_SEARCH_MIN_TRUST_LEVEL", "9", "USER_SEARCH_MIN_TRUST_LEVEL"),
        ("DIRECTORY_PAGE_SIZE", "0", "DIRECTORY_PAGE_SIZE"),
        ("DIRECTORY_ACTIVE_COLUMNS", "likes_received,karma", "karma"),
    ],
)
def test_settings_fails_fast_on_invalid_values(monkeypatch, name: str, value: str, message: str) -> None:
    monkeypatch.setenv(name, value)

    with pytest.raises(ValueError, match=message):
        Settings.load()


@pytest.mark.unit
def test_settings_requires_secret_key_in_production(monkeypatch) -> None:
    monkeypatch.setenv("FLASK_ENV", "production")
    monkeypatch.setenv("SECRET_KEY", "")

    with pytest.raises(ValueError, match="SECRET_KEY"):
        Settings.load()
