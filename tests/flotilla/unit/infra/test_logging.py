import logging

import orjson
import pytest

from flotilla.game.infra.logging import JsonFormatter, LoggingConfig, build_logging_config, configure_logging


@pytest.fixture
def restore_root_logging():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    configure_logging(LoggingConfig())
    root.handlers[:] = handlers
    root.setLevel(level)


def test_json_formatter_includes_fields_and_message() -> None:
    logger = logging.getLogger("test.json.formatter")
    record = logger.makeRecord(
        name=logger.name,
        level=logging.INFO,
        fn=__file__,
        lno=1,
        msg="hello %s",
        args=("world",),
        exc_info=None,
        extra={"custom": 1},
    )
    payload = JsonFormatter().format(record)
    assert '"msg":"hello world"' in payload
    decoded = orjson.loads(payload)
    assert decoded["fields"] == {"custom": 1}
    assert decoded["level"] == "INFO"


def test_build_logging_config_from_env(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("FLOTILLA_APP_DATA_DIR", str(tmp_path / "appdata"))
    monkeypatch.delenv("FLOTILLA_LOG_DIR", raising=False)
    monkeypatch.delenv("FLOTILLA_LOG_LEVEL", raising=False)
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("LOG_FORMAT", "JSON")
    config = build_logging_config(write_file=False)
    assert config == LoggingConfig(level_name="DEBUG", console_format="json", file_path=None)
    monkeypatch.setenv("FLOTILLA_LOG_LEVEL", "warning")
    assert build_logging_config(write_file=False).level_name == "WARNING"


def test_configure_logging_writes_json_lines_file(monkeypatch, tmp_path, restore_root_logging) -> None:
    monkeypatch.setenv("FLOTILLA_APP_DATA_DIR", str(tmp_path / "appdata"))
    monkeypatch.delenv("FLOTILLA_LOG_DIR", raising=False)
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    configure_logging(build_logging_config())
    assert restore_root_logging.level == logging.DEBUG

    logging.getLogger("test.logging.file").info("match_created match_id=%s", "abc")
    configure_logging(LoggingConfig())

    files = list((tmp_path / "appdata" / "logs").glob("flotilla_run_*.jsonl"))
    assert len(files) == 1
    lines = [orjson.loads(line) for line in files[0].read_text(encoding="utf-8").splitlines()]
    assert any(line["msg"] == "match_created match_id=abc" for line in lines)
