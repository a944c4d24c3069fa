# tests/test_config/test_settings.py
import os
import pytest
from pydantic import ValidationError
from ztext.config.settings import App, NAME_CHARACTERS, appsettings


def setup_function():
    for k in list(os.environ):
        if k.startswith("ZTEXT_"):
            del os.environ[k]


def teardown_function():
    for k in list(os.environ):
        if k.startswith("ZTEXT_"):
            del os.environ[k]


def test_app_default_settings():
    app = App()
    assert app.beQuiet is False
    assert app.errorChecks is True
    assert app.maxDepth == 128


def test_app_env_override():
    os.environ["ZTEXT_BEQUIET"] = "true"
    os.environ["ZTEXT_ERRORCHECKS"] = "false"
    os.environ["ZTEXT_MAXDEPTH"] = "8"

    app = App()
    assert app.beQuiet is True
    assert app.errorChecks is False
    assert app.maxDepth == 8


def test_app_env_case_insensitive():
    os.environ["ztext_maxdepth"] = "12"
    try:
        assert App().maxDepth == 12
    finally:
        del os.environ["ztext_maxdepth"]


def test_app_rejects_non_positive_depth():
    os.environ["ZTEXT_MAXDEPTH"] = "0"
    with pytest.raises(ValidationError):
        App()


def test_module_instance():
    assert isinstance(appsettings, App)


def test_name_characters():
    assert "_" in NAME_CHARACTERS
    assert "9" in NAME_CHARACTERS
    assert "-" not in NAME_CHARACTERS
    assert "$" not in NAME_CHARACTERS
    assert len(NAME_CHARACTERS) == 63
