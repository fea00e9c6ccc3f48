import io
import logging

import pytest

from simplefs.cli import build_parser, main


def test_main_reads_stdin(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO('create /f\nwrite /f "abc"\nread /f\nexit\n'))

    assert main([]) == 0

    captured = capsys.readouterr()
    assert captured.out == "ok\nok 3\ncontenuto abc\n"


def test_main_reads_input_file(tmp_path, capsys):
    script = tmp_path / "commands.txt"
    script.write_text("create_dir /a\ncreate /a/b\nfind b\n", encoding="utf-8")

    assert main(["--input", str(script)]) == 0

    assert capsys.readouterr().out == "ok\nok\nok /a/b\n"


def test_main_applies_limits(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("create /a\ncreate /b\nexit\n"))

    assert main(["--max-nodes", "1"]) == 0

    assert capsys.readouterr().out == "ok\nno\n"


def test_main_configures_logging(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("exit\n"))

    main(["--log-level", "info"])

    logger = logging.getLogger("simplefs")
    assert logger.level == logging.INFO
    assert "processed 1 line(s)" in capsys.readouterr().err


@pytest.mark.parametrize("value", ["0", "-3", "many"])
def test_limit_flags_reject_bad_values(value, capsys):
    with pytest.raises(SystemExit):
        build_parser().parse_args(["--max-depth", value])


def test_unknown_log_level_is_a_usage_error(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(["--log-level", "chatty"])

    assert excinfo.value.code == 2
    assert "unknown log level" in capsys.readouterr().err


def test_max_depth_above_ceiling_is_a_usage_error(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(["--max-depth", "100000"])

    assert excinfo.value.code == 2
    assert "max_depth" in capsys.readouterr().err
