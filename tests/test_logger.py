import pytest

from ragamaya import logger
from ragamaya.logger import PanicError


def test_info_goes_to_stdout(capsys):
    logger.info("hello %s", "world")
    out, err = capsys.readouterr()
    assert out.startswith("\033[34m[INFO] \033[0m")
    assert out.endswith("hello world\n")
    assert err == ""


def test_warning_prefix(capsys):
    logger.warning("careful")
    out, _ = capsys.readouterr()
    assert "[WARNING] " in out
    assert out.endswith("careful\n")


def test_error_goes_to_stderr(capsys):
    logger.error("failed %d times", 3)
    out, err = capsys.readouterr()
    assert out == ""
    assert "[ERROR] " in err
    assert err.endswith("failed 3 times\n")


def test_v_verb_is_supported(capsys):
    logger.info("took %v", 12)
    out, _ = capsys.readouterr()
    assert out.endswith("took 12\n")


def test_message_without_args_is_literal(capsys):
    logger.info("100% done")
    out, _ = capsys.readouterr()
    assert out.endswith("100% done\n")


def test_panic_error_logs_and_raises(capsys):
    with pytest.raises(PanicError, match="something went wrong, check panic log"):
        logger.panic_error("boom %s", "now")
    _, err = capsys.readouterr()
    assert "[PANIC] " in err
    assert err.endswith("boom now\n")