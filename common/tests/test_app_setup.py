import logging

from common import app_setup
from common.app_setup import print_and_log, print_error, setup_logging


def test_setup_logging_writes_to_given_file(tmp_path):
    logfile = tmp_path / "log.txt"
    logger = setup_logging(app_name="filetree-test", logfile=str(logfile), loglevel=logging.INFO)
    try:
        logging.getLogger("filetree.tree").info("Moved 'doc1' from 'documents' to 'pictures'")
        for handler in logger.handlers:
            handler.flush()
        assert "Moved 'doc1'" in logfile.read_text(encoding="utf-8")
        assert app_setup._print_logger is logger
    finally:
        app_setup.set_print_logger(None)


def test_print_helpers_escape_markup(capsys):
    app_setup.set_print_logger(None)
    print_and_log("path ['root', 'documents']")
    print_error("Node not found: [bold]'ghost'")
    captured = capsys.readouterr()
    assert "path ['root', 'documents']" in captured.out
    assert "Node not found: [bold]'ghost'" in captured.err


def test_setup_logging_closes_replaced_handlers(tmp_path):
    first = setup_logging(app_name="filetree-test", logfile=str(tmp_path / "first.txt"))
    old_handler = first.handlers[0]
    try:
        second = setup_logging(app_name="filetree-test", logfile=str(tmp_path / "second.txt"))
        assert old_handler not in second.handlers
        assert old_handler.stream is None
    finally:
        app_setup.set_print_logger(None)
