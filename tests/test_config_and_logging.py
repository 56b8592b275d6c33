import logging

import pytest
from pydantic import ValidationError

from forcebulk.adapters.logging_adapter import LoggingAdapter
from forcebulk.core.config import DEFAULT_POLL_INTERVAL, BulkJobConfig
from forcebulk.core.logging_config import coerce_level, configure_logging, job_id_var
from forcebulk.core.settings import BulkSettings


class TestBulkJobConfig:

    def test_defaults(self):
        config = BulkJobConfig()
        assert config.poll_interval == DEFAULT_POLL_INTERVAL == 10.0
        assert config.delete_method == "GET"

    def test_rejects_non_positive_interval(self):
        with pytest.raises(ValidationError):
            BulkJobConfig(poll_interval=0)

    def test_rejects_unknown_fields_and_is_frozen(self):
        with pytest.raises(ValidationError):
            BulkJobConfig(max_polls=3)
        config = BulkJobConfig()
        with pytest.raises(ValidationError):
            config.poll_interval = 1.0

    def test_from_app_settings(self):
        settings = BulkSettings(FORCEBULK_POLL_INTERVAL=2.5, FORCEBULK_DELETE_METHOD="DELETE")
        config = BulkJobConfig.from_app_settings(settings)
        assert config.poll_interval == 2.5
        assert config.delete_method == "DELETE"


def test_settings_read_environment(monkeypatch):
    monkeypatch.setenv("FORCEBULK_POLL_INTERVAL", "0.5")
    monkeypatch.setenv("FORCEBULK_API_VERSION", "v61.0")
    settings = BulkSettings()
    assert settings.FORCEBULK_POLL_INTERVAL == 0.5
    assert settings.FORCEBULK_API_VERSION == "61.0"


def test_print_settings_does_not_leak_token(capsys):
    settings = BulkSettings(FORCEBULK_ACCESS_TOKEN="super-secret")
    settings.print_settings(LoggingAdapter("forcebulk.test"))
    assert "super-secret" not in capsys.readouterr().out


@pytest.mark.parametrize(
    "level, expected",
    [(None, logging.INFO), ("debug", logging.DEBUG), (" WARNING ", logging.WARNING), ("nonsense", logging.INFO), (5, 5)],
)
def test_coerce_level(level, expected):
    assert coerce_level(level) == expected


def test_configure_logging_injects_job_id(capsys):
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    try:
        configure_logging("DEBUG")
        token = job_id_var.set("750abc")
        try:
            logging.getLogger("forcebulk.test").info("polling")
            logging.getLogger("forcebulk.test").error("broken")
        finally:
            job_id_var.reset(token)

        captured = capsys.readouterr()
        assert "job=750abc: polling" in captured.out
        assert "broken" not in captured.out
        assert "job=750abc: broken" in captured.err
    finally:
        for h in list(root.handlers):
            root.removeHandler(h)
        for h in saved_handlers:
            root.addHandler(h)
        root.setLevel(saved_level)


def test_logging_adapter_sets_level():
    adapter = LoggingAdapter("forcebulk.adapter-test", "warning")
    assert adapter.logger.level == logging.WARNING
    assert adapter.logger.propagate is True
