# services/logger.py - Terminal session logging.
"""
Terminal Logger - copies everything printed to a session file.

The pipeline logs with tagged print() lines ("[Analytics]", "[Chart]",
"[Sync]", "[UI]"). Starting the terminal logger tees stdout/stderr into
data/logs/session_YYYYMMDD_HHMMSS.txt with an [HH:MM:SS] prefix per line,
without changing any call site.
"""

import sys
import threading
from pathlib import Path
from typing import TextIO

from services.time_centralize_utils import get_local_now


# === PATHS ===

LOG_DIR = Path(__file__).parent.parent / "data" / "logs"


class TeeWriter:
    """
    Stream wrapper: terminal output unchanged, session file timestamped.

    stdout and stderr wrappers share one sink and one lock so lines from
    both streams land in the file whole.
    """

    def __init__(self, stream: TextIO, sink: TextIO, lock: threading.Lock):
        self.stream = stream
        self.sink = sink
        self._lock = lock
        self._line_open = False

    def _stamp(self, text: str) -> str:
        prefix = f"[{get_local_now().strftime('%H:%M:%S')}] "
        parts = []
        for line in text.splitlines(keepends=True):
            if not self._line_open:
                parts.append(prefix)
            parts.append(line)
            self._line_open = not line.endswith("\n")
        return "".join(parts)

    def write(self, text: str) -> int:
        self.stream.write(text)
        with self._lock:
            if not self.sink.closed:
                self.sink.write(self._stamp(text))
                self.sink.flush()
        return len(text)

    def flush(self) -> None:
        self.stream.flush()

    def fileno(self) -> int:
        return self.stream.fileno()

    def isatty(self) -> bool:
        return self.stream.isatty()


class TerminalLogger:
    """
    Process-wide session log. One instance, one file per start().

    Usage:
        from services.logger import terminal_logger

        path = terminal_logger.start()
        print("   [UI] ready")      # lands in the terminal and in path
        terminal_logger.stop()
    """

    _instance = None
    _instance_lock = threading.Lock()

    def __new__(cls):
        with cls._instance_lock:
            if cls._instance is None:
                instance = super().__new__(cls)
                instance._sink = None
                instance._path = None
                instance._saved_streams = None
                instance._sink_lock = threading.Lock()
                cls._instance = instance
        return cls._instance

    @property
    def started(self) -> bool:
        return self._sink is not None

    @property
    def log_path(self) -> Path | None:
        """Session file of the current (or last) capture."""
        return self._path

    def start(self, log_dir: Path | None = None) -> Path:
        """Begin teeing stdout/stderr. Returns the session file path."""
        if self.started:
            return self._path

        log_dir = log_dir or LOG_DIR
        log_dir.mkdir(parents=True, exist_ok=True)

        opened_at = get_local_now()
        self._path = log_dir / f"session_{opened_at.strftime('%Y%m%d_%H%M%S')}.txt"
        self._sink = self._path.open("w", encoding="utf-8")
        self._sink.write(f"=== Session started {opened_at.isoformat(timespec='seconds')} ===\n")
        self._sink.flush()

        self._saved_streams = (sys.stdout, sys.stderr)
        sys.stdout = TeeWriter(sys.stdout, self._sink, self._sink_lock)
        sys.stderr = TeeWriter(sys.stderr, self._sink, self._sink_lock)
        return self._path

    def stop(self) -> None:
        """Put the original streams back and close the session file."""
        if not self.started:
            return

        sys.stdout, sys.stderr = self._saved_streams
        self._saved_streams = None

        with self._sink_lock:
            self._sink.write(f"=== Session ended {get_local_now().isoformat(timespec='seconds')} ===\n")
            self._sink.close()
        self._sink = None


terminal_logger = TerminalLogger()
