"""Test the command line entry point."""

import logging
from unittest.mock import patch

import pytest

from wrapview import __main__ as cli
from wrapview.constants import ViewerConstants


def test_version(capsys):
    with patch.object(cli, 'get_version_string', return_value='1.2.3'):
        assert cli.main(['--version']) == 0
    assert capsys.readouterr().out.strip() == '1.2.3'


def test_missing_path_is_usage_error(capsys):
    assert cli.main([]) == 2
    assert ViewerConstants.USAGE_MESSAGE in capsys.readouterr().err


def test_extra_arguments_are_usage_error(capsys):
    assert cli.main(['a.txt', 'b.txt']) == 2
    assert 'usage' in capsys.readouterr().err


def test_invalid_utf8_exits_with_error(tmp_path, capsys):
    path = tmp_path / "bad.txt"
    path.write_bytes(b"\xc3\x28")
    with patch('wrapview.viewer.TerminalInterface'), \
            patch('wrapview.viewer.Viewer.run') as run:
        assert cli.main([str(path)]) == 1
    run.assert_not_called()
    err = capsys.readouterr().err
    assert err.startswith('wrapview: error:')
    assert str(path) in err


def test_runs_viewer_on_path(tmp_path):
    path = tmp_path / "doc.txt"
    path.write_bytes(b"hello\n")
    with patch('wrapview.viewer.TerminalInterface'), \
            patch('wrapview.viewer.Viewer.run') as run:
        assert cli.main([str(path)]) == 0
    run.assert_called_once_with()


def test_save_failure_exits_with_error(tmp_path, capsys):
    with patch('wrapview.viewer.TerminalInterface'), \
            patch('wrapview.viewer.Viewer.run', side_effect=PermissionError("read-only")):
        assert cli.main([str(tmp_path / "doc.txt")]) == 1
    assert 'read-only' in capsys.readouterr().err


def test_configure_logging_writes_to_file(tmp_path, monkeypatch):
    log_path = tmp_path / "wrapview.log"
    monkeypatch.setenv(ViewerConstants.LOG_ENV_VAR, str(log_path))
    logger = logging.getLogger("wrapview")
    before = list(logger.handlers)
    cli.configure_logging()
    try:
        logging.getLogger("wrapview.layout").debug("hello from layout")
        for handler in logger.handlers:
            handler.flush()
        assert "hello from layout" in log_path.read_text(encoding='utf-8')
    finally:
        for handler in logger.handlers[len(before):]:
            logger.removeHandler(handler)
            handler.close()
        logger.setLevel(logging.NOTSET)


def test_configure_logging_off_by_default(monkeypatch):
    monkeypatch.delenv(ViewerConstants.LOG_ENV_VAR, raising=False)
    logger = logging.getLogger("wrapview")
    before = list(logger.handlers)
    cli.configure_logging()
    assert logger.handlers == before


def test_layout_error_is_logged_and_propagates(tmp_path, caplog):
    from wrapview.layout import LayoutError

    with patch('wrapview.viewer.TerminalInterface'), \
            patch('wrapview.viewer.Viewer.run', side_effect=LayoutError("bad offset")):
        with caplog.at_level(logging.ERROR, logger="wrapview"):
            with pytest.raises(LayoutError):
                cli.main([str(tmp_path / "doc.txt")])
    records = [r for r in caplog.records if r.name == "wrapview.__main__"]
    assert len(records) == 1
    assert records[0].exc_info[0] is LayoutError
