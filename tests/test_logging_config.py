from __future__ import annotations

import json
import logging
import sys

from nodebook.io.logging_config import NodebookJSONFormatter, setup_nodebook_logging


def _record(msg: str = "unit test message") -> logging.LogRecord:
    return logging.LogRecord(
        name="nodebook",
        level=logging.INFO,
        pathname=__file__,
        lineno=42,
        msg=msg,
        args=(),
        exc_info=None,
    )


def test_nodebook_json_formatter_includes_context_fields() -> None:
    record = _record()
    record.graph_context = {"nodes": 3}  # type: ignore[attr-defined]
    payload = json.loads(NodebookJSONFormatter().format(record))
    assert payload["level"] == "INFO"
    assert payload["message"] == "unit test message"
    assert payload["line"] == 42
    assert payload["graph_context"]["nodes"] == 3
    assert "exception" not in payload


def test_nodebook_json_formatter_includes_exception() -> None:
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        record = logging.LogRecord("nodebook", logging.ERROR, __file__, 1, "failed", (), sys.exc_info())
    payload = json.loads(NodebookJSONFormatter().format(record))
    assert "RuntimeError: boom" in payload["exception"]


def test_setup_nodebook_logging_emits_json_lines(capsys) -> None:
    logger = logging.getLogger("nodebook")
    old_handlers = list(logger.handlers)
    old_level = logger.level
    try:
        setup_nodebook_logging(level="info", json_output=True)
        logger.info("compiled graph", extra={"graph_context": {"mode": "petri-net"}})
        err = capsys.readouterr().err.strip().splitlines()
        assert err
        parsed = json.loads(err[-1])
        assert parsed["message"] == "compiled graph"
        assert parsed["graph_context"]["mode"] == "petri-net"
    finally:
        logger.handlers[:] = old_handlers
        logger.setLevel(old_level)


def test_setup_nodebook_logging_writes_file(tmp_path) -> None:
    logger = logging.getLogger("nodebook")
    old_handlers = list(logger.handlers)
    old_level = logger.level
    log_file = tmp_path / "nodebook.log"
    try:
        setup_nodebook_logging(level=logging.DEBUG, json_output=True, log_file=str(log_file))
        logger.debug("to file")
        for handler in logger.handlers:
            handler.flush()
        lines = log_file.read_text(encoding="utf-8").strip().splitlines()
        assert json.loads(lines[-1])["message"] == "to file"
    finally:
        for handler in logger.handlers:
            handler.close()
        logger.handlers[:] = old_handlers
        logger.setLevel(old_level)


def test_compile_context_reaches_json_output(capsys) -> None:
    from nodebook import compile_text

    logger = logging.getLogger("nodebook")
    old_handlers = list(logger.handlers)
    old_level = logger.level
    try:
        setup_nodebook_logging(level="info", json_output=True)
        compile_text("# Water [Molecule]\n<is_a> Liquid;")
        lines = [json.loads(line) for line in capsys.readouterr().err.strip().splitlines()]
        contexts = [line["graph_context"] for line in lines if "graph_context" in line]
        assert contexts[-1]["mode"] == "concept-map"
        assert contexts[-1]["nodes"] == 2
        assert contexts[-1]["edges"] == 1
    finally:
        logger.handlers[:] = old_handlers
        logger.setLevel(old_level)
