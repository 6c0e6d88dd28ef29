from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from ..utils.logging import get_logger

logger = get_logger("seo.output.reports")


class ReportSink(ABC):
    @abstractmethod
    def write_artifact(self, name: str, content: str) -> str:
        """Persist ``content`` under ``name`` and return where it went.

        Raises ``OSError`` when the artifact cannot be written.
        """


class FileReportSink(ReportSink):
    """Writes artifacts as UTF-8 files below ``out_dir``."""

    def __init__(self, out_dir: Path | str = "./seo-reports") -> None:
        self.out_dir = Path(out_dir)

    def write_artifact(self, name: str, content: str) -> str:
        if Path(name).name != name:
            raise ValueError(f"artifact name must be a bare file name: {name}")
        self.out_dir.mkdir(parents=True, exist_ok=True)
        path = self.out_dir / name
        path.write_text(content, encoding="utf-8")
        logger.info("Wrote report artifact %s", path)
        return str(path)
