import logging
import re
from pathlib import Path

from scent_trail.core.playback import LogPlayback, iter_current_keys
from scent_trail.event_log import EventLogger, configure_error_log

LINE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}\.\d{3} [+-]\d{4}\t")


def test_event_line_format(tmp_path: Path):
    path = tmp_path / "logs" / "rs_logger.txt"
    event_log = EventLogger(path)

    event_log.current("Parser.parse()")
    event_log.recommendation("Lexer.next()", 3)
    event_log.words(["token", "parse"])
    event_log.model("TFIDF", False)
    event_log.close()

    lines = path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 4
    assert all(LINE_PATTERN.match(line) for line in lines)
    assert [LINE_PATTERN.sub("", line) for line in lines] == [
        "current\tParser.parse()",
        "rec3\tLexer.next()",
        "words\ttoken\tparse",
        "model\tTFIDF\tnoHist",
    ]


def test_event_log_appends(tmp_path: Path):
    path = tmp_path / "rs_logger.txt"
    first = EventLogger(path)
    first.current("A")
    first.close()
    second = EventLogger(path)
    second.current("B")
    second.close()

    assert len(path.read_text(encoding="utf-8").splitlines()) == 2


def test_event_log_without_path_is_silent(tmp_path: Path):
    event_log = EventLogger("")

    event_log.current("A")
    event_log.close()

    assert not event_log.enabled
    assert list(tmp_path.iterdir()) == []


def test_error_log_receives_warnings(tmp_path: Path):
    path = tmp_path / "rs_errorLogger.txt"
    handler = configure_error_log(path)
    try:
        logging.getLogger("scent_trail.tests").warning("snapshot %s is corrupt", "rs_pfis.sav")
        logging.getLogger("scent_trail.tests").info("not written")
    finally:
        logging.getLogger("scent_trail").removeHandler(handler)
        handler.close()

    content = path.read_text(encoding="utf-8")
    assert "snapshot rs_pfis.sav is corrupt" in content
    assert "not written" not in content
    assert configure_error_log("") is None


def _write_log(path: Path) -> None:
    path.write_text(
        "2024-01-31 09:15:02.417 +0800\tcursor\t12\tParser.java\n"
        "2024-01-31 09:15:02.418 +0800\tcurrent\tParser.parse()\n"
        "2024-01-31 09:15:02.420 +0800\trec0\tLexer.next()\n"
        "\n"
        "garbage\n"
        "2024-01-31 09:15:09.001 +0800\tcurrent\n"
        "2024-01-31 09:15:09.002 +0800\tcurrent\tLexer.next()\n",
        encoding="utf-8",
    )


def test_playback_replays_current_records(tmp_path: Path):
    path = tmp_path / "rs_logger.txt"
    _write_log(path)
    visited = []
    sleeps = []

    playback = LogPlayback(visited.append, interval=5.0, sleep=sleeps.append)

    assert playback.replay(path) == 2
    assert visited == ["Parser.parse()", "Lexer.next()"]
    assert sleeps == [5.0, 5.0]
    assert list(iter_current_keys(path)) == visited


def test_playback_thread_logs_missing_file(tmp_path: Path, caplog):
    playback = LogPlayback(lambda key: None, sleep=lambda seconds: None)

    with caplog.at_level(logging.ERROR, logger="scent_trail"):
        thread = playback.start(tmp_path / "missing.txt")
        thread.join(timeout=5)

    assert not thread.is_alive()
    assert "missing.txt" in caplog.text
