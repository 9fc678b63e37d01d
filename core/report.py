import json
import logging
from dataclasses import asdict
from enum import Enum
from pathlib import Path

from core.models import AuditReport, ReportWriteError

logger = logging.getLogger(__name__)


class ReportSink:
    """
    The plaintext report file for one run.

    The file is created exclusively, so an existing report is never
    overwritten; a same-second collision gets a "-1", "-2", ... suffix.
    Lines are appended in order and the file is closed exactly once.
    Every OSError surfaces as ReportWriteError.
    """

    def __init__(self, path: str | Path):
        self.requested_path = Path(path)
        self.path: Path | None = None
        self._fh = None

    def open(self) -> Path:
        path = self.requested_path
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            n = 0
            while True:
                try:
                    self._fh = path.open("x", encoding="utf-8", newline="\n")
                    break
                except FileExistsError:
                    n += 1
                    path = self.requested_path.with_name(
                        f"{self.requested_path.stem}-{n}{self.requested_path.suffix}")
        except OSError as e:
            raise ReportWriteError(f"cannot create report file {path}: {e}") from e
        self.path = path
        logger.debug("report file %s opened", path)
        return path

    def write_line(self, line: str = "") -> None:
        if self._fh is None:
            raise ReportWriteError("report file is not open")
        try:
            self._fh.write(line + "\n")
        except OSError as e:
            raise ReportWriteError(f"cannot write report file {self.path}: {e}") from e

    def close(self) -> None:
        if self._fh is None:
            return
        fh, self._fh = self._fh, None
        try:
            fh.flush()
            fh.close()
        except OSError as e:
            raise ReportWriteError(f"cannot finalize report file {self.path}: {e}") from e

    def __enter__(self) -> "ReportSink":
        self.open()
        return self

    def __exit__(self, *exc) -> None:
        self.close()


def _jsonable(value):
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Path):
        return str(value)
    raise TypeError(f"{type(value).__name__} is not JSON serializable")


def write_json_report(report: AuditReport, out_path: str | Path) -> Path:
    out_path = Path(out_path)
    try:
        out_path.parent.mkdir(parents=True, exist_ok=True)

        with out_path.open("w", encoding="utf-8") as f:
            json.dump(asdict(report), f, indent=2, ensure_ascii=False, default=_jsonable)
    except OSError as e:
        raise ReportWriteError(f"cannot write JSON report {out_path}: {e}") from e

    return out_path
