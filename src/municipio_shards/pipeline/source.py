"""Retrieval of the raw registry lines, remote or local."""

import logging
import os
import tempfile
from pathlib import Path

import requests

from municipio_shards.errors import SourceUnavailable

logger = logging.getLogger(__name__)

DEFAULT_SOURCE_URL = "https://www.gov.br/receitafederal/dados/municipios.csv"
DEFAULT_TIMEOUT = 60
DEFAULT_ENCODING = "utf-8"


def _split_lines(text: str) -> list[str]:
    return text.lstrip("\ufeff").splitlines()


def fetch_lines(
    url: str = DEFAULT_SOURCE_URL,
    timeout: float = DEFAULT_TIMEOUT,
    encoding: str = DEFAULT_ENCODING,
) -> list[str]:
    """
    Download the dataset and return its lines.

    Raises SourceUnavailable on any transport or HTTP error, or an empty body.
    """
    logger.info("Downloading %s", url)
    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as exc:
        raise SourceUnavailable(f"download of {url} failed: {exc}") from exc

    lines = _split_lines(response.content.decode(encoding, errors="replace"))
    if not lines:
        raise SourceUnavailable(f"download of {url} returned no data")

    logger.info("Downloaded %d lines", len(lines))
    return lines


def read_local_lines(path: str | Path, encoding: str = DEFAULT_ENCODING) -> list[str]:
    """Read a locally supplied dataset. A missing or unreadable file is SourceUnavailable."""
    try:
        text = Path(path).read_text(encoding=encoding, errors="replace")
    except OSError as exc:
        raise SourceUnavailable(f"cannot read {path}: {exc}") from exc

    lines = _split_lines(text)
    if not lines:
        raise SourceUnavailable(f"{path} is empty")
    return lines


def refresh_local_copy(
    lines: list[str],
    local_path: str | Path,
    diff_path: str | Path,
) -> int:
    """
    Replace the local copy of the dataset with freshly fetched lines.

    When a previous copy exists, lines absent from it are written to
    diff_path once the new copy is in place. Returns the number of such
    lines (0 when there is no previous copy or nothing changed). Any
    filesystem failure is reported as SourceUnavailable.
    """
    local = Path(local_path)
    differences: list[str] = []
    had_previous = False

    try:
        if local.is_file():
            had_previous = True
            previous = set(_split_lines(local.read_text(encoding=DEFAULT_ENCODING, errors="replace")))
            differences = [line for line in lines if line not in previous]
        else:
            logger.info("No local copy at %s, saving the new version", local)

        _replace_text(local, "\n".join(lines) + "\n")

        if differences:
            Path(diff_path).write_text("\n".join(differences) + "\n", encoding=DEFAULT_ENCODING)
            logger.info("%d changed lines written to %s", len(differences), diff_path)
        elif had_previous:
            logger.info("Local copy %s is up to date", local)
    except OSError as exc:
        raise SourceUnavailable(f"cannot refresh local copy {local}: {exc}") from exc

    return len(differences)


def _replace_text(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding=DEFAULT_ENCODING, newline="\n") as handle:
            handle.write(text)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
