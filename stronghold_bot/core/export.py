"""Persist the XML snapshot to its configured location."""

from __future__ import annotations

import contextlib
import os
from pathlib import Path

from ..errors import ExportWriteError
from ..logging_config import get_logger

log = get_logger("export")


class ExportWriter:
    """Overwrite a single export file with each new document.

    Documents are written to a sibling ``.tmp`` file and moved into place with
    :func:`os.replace`, so readers see either the previous export or the new
    one in full.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = Path(path)

    @property
    def tmp_path(self) -> Path:
        return self.path.with_name(self.path.name + ".tmp")

    def write(self, document: str) -> None:
        """Replace the export with ``document``.

        Raises :class:`ExportWriteError` if the file cannot be written.
        """
        tmp = self.tmp_path
        try:
            with open(tmp, "w", encoding="utf-8") as f:
                f.write(document)
            os.replace(tmp, self.path)
        except (OSError, UnicodeError) as exc:
            with contextlib.suppress(OSError):
                tmp.unlink(missing_ok=True)
            raise ExportWriteError(f"Could not write {self.path}: {exc}") from exc
        log.info("XML file updated: %s", self.path)
