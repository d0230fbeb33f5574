"""Optional qpdf pass that rewrites output with object streams."""

from __future__ import annotations

import logging
import shutil
import subprocess
import tempfile
from pathlib import Path
from typing import Sequence

_LOGGER = logging.getLogger("pdfcraft.compress")

# qpdf exits with 3 when it succeeded with warnings.
_QPDF_OK = (0, 3)


def _qpdf_available() -> str | None:
    return shutil.which("qpdf")


def build_qpdf_command(executable: str, source: Path, output: Path) -> list[str]:
    return [
        executable,
        "--object-streams=generate",
        "--stream-data=compress",
        "--recompress-flate",
        str(source),
        str(output),
    ]


def run_subprocess(command: Sequence[str]) -> subprocess.CompletedProcess[str]:
    _LOGGER.debug("Executing command: %s", " ".join(command))
    completed = subprocess.run(
        list(command),
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        check=False,
        text=True,
    )
    _LOGGER.debug(
        "Command finished with exit code %s\nstdout: %s\nstderr: %s",
        completed.returncode,
        completed.stdout,
        completed.stderr,
    )
    return completed


def repack_object_streams(data: bytes) -> bytes:
    """Return *data* rewritten by qpdf, or unchanged if qpdf is unusable."""

    executable = _qpdf_available()
    if not executable:
        _LOGGER.debug("qpdf not available; keeping pypdf serialization")
        return data

    with tempfile.TemporaryDirectory(prefix="pdfcraft-") as temp_dir:
        source = Path(temp_dir) / "input.pdf"
        output = Path(temp_dir) / "output.pdf"
        source.write_bytes(data)
        try:
            result = run_subprocess(build_qpdf_command(executable, source, output))
        except OSError as exc:
            _LOGGER.warning("Failed to execute qpdf: %s", exc)
            return data

        if result.returncode not in _QPDF_OK or not output.exists():
            _LOGGER.warning(
                "qpdf failed with code %s: %s", result.returncode, result.stderr.strip()
            )
            return data

        repacked = output.read_bytes()

    if len(repacked) >= len(data):
        _LOGGER.debug("qpdf output is not smaller (%d >= %d bytes)", len(repacked), len(data))
        return data
    _LOGGER.info("Repacked with object streams: %d -> %d bytes", len(data), len(repacked))
    return repacked


__all__ = ["build_qpdf_command", "repack_object_streams", "run_subprocess"]
