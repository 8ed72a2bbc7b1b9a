import pytest

import i18n


@pytest.fixture
def locales(tmp_path):
    (tmp_path / "en.json").write_text('{"field.uptime": "Uptime", "field.shell": "Shell"}')
    (tmp_path / "de.json").write_text('{"field.uptime": "Laufzeit"}')
    return tmp_path


def test_overlay_keeps_english_base(locales):
    i18n.init(locale_override="de_DE.UTF-8", locales_dir=locales)
    assert i18n.t("field.uptime") == "Laufzeit"
    assert i18n.t("field.shell") == "Shell"


@pytest.mark.parametrize("code", ["C", "POSIX", "xx_YY"])
def test_unknown_locale_uses_english(locales, code):
    i18n.init(locale_override=code, locales_dir=locales)
    assert i18n.t("field.uptime") == "Uptime"


def test_missing_key(locales):
    i18n.init(locale_override="en", locales_dir=locales)
    assert i18n.t("field.gpu") == "field.gpu"
    assert i18n.t("field.gpu", default="GPU") == "GPU"


def test_locale_from_environment(monkeypatch, locales):
    monkeypatch.delenv("LC_ALL", raising=False)
    monkeypatch.delenv("LC_MESSAGES", raising=False)
    monkeypatch.setenv("LANG", "de_AT.UTF-8")
    i18n.init(locales_dir=locales)
    assert i18n.t("field.uptime") == "Laufzeit"


def test_missing_locale_files(tmp_path):
    i18n.init(locale_override="de", locales_dir=tmp_path)
    assert i18n.t("field.uptime", default="Uptime") == "Uptime"
