import logging

import pytest

from stormgate.const import VerbosityLevel
from stormgate.gateway_error import GatewayFatal
import stormgate.messenger as msgr


@pytest.fixture
def verbosity_reset():
    yield
    msgr.set_verbosity(msgr.verbosity())


def test_verbosity_from_env(monkeypatch):
    monkeypatch.setenv("STORMGATE_VERBOSE", "4")
    assert msgr.verbosity() == VerbosityLevel.DEBUG
    monkeypatch.setenv("STORMGATE_VERBOSE", "loud")
    assert msgr.verbosity() == VerbosityLevel.QUIET
    monkeypatch.delenv("STORMGATE_VERBOSE")
    assert msgr.verbosity() == VerbosityLevel.QUIET


def test_set_verbosity(verbosity_reset):
    logger = logging.getLogger("stormgate")
    msgr.set_verbosity(VerbosityLevel.VERBOSE)
    assert logger.level == 15
    msgr.set_verbosity(VerbosityLevel.SUPER_QUIET)
    assert logger.level == logging.ERROR


def test_fatal(caplog):
    with pytest.raises(GatewayFatal):
        msgr.fatal("no way out")
    assert "ERROR: no way out" in caplog.text


def test_file_handler(tmp_path, verbosity_reset):
    log_file = tmp_path / "run.log"
    handler = msgr.add_file_handler(log_file)
    try:
        msgr.set_verbosity(VerbosityLevel.DEBUG)
        msgr.message("started")
        msgr.warning("something odd")
    finally:
        logging.getLogger("stormgate").removeHandler(handler)
        handler.close()
    content = log_file.read_text()
    assert "INFO - started" in content
    assert "WARNING - WARNING: something odd" in content
