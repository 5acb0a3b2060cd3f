"""Send rendered receipts to a CUPS printer."""

from __future__ import annotations

import logging
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass
class PrinterInfo:
    name: str
    is_default: bool


def _require(command: str) -> None:
    if shutil.which(command) is None:
        raise RuntimeError(
            f"{command} command not found. Install CUPS "
            "(Ubuntu/Debian: sudo apt install cups)"
        )


def list_printers() -> list[PrinterInfo]:
    """Printers known to CUPS, with the system default flagged.

    An unreachable scheduler yields an empty list.

    Raises:
        RuntimeError: If lpstat is not installed.
    """
    _require("lpstat")
    try:
        result = subprocess.run(
            ["lpstat", "-d", "-p"], capture_output=True, text=True, timeout=10
        )
    except (subprocess.TimeoutExpired, OSError) as e:
        logger.warning("lpstat failed: %s", e)
        return []

    default = ""
    names: list[str] = []
    for line in result.stdout.splitlines():
        # "system default destination: Office_Laser"
        if line.startswith("system default destination:"):
            default = line.partition(":")[2].strip()
        # "printer Office_Laser is idle.  enabled since ..."
        elif line.startswith("printer "):
            names.append(line.split()[1])
    return [PrinterInfo(name=n, is_default=(n == default)) for n in names]


def print_receipt(
    pdf_path: str | Path,
    printer_name: str | None = None,
    copies: int = 1,
) -> None:
    """Queue a receipt PDF on A4 paper.

    Raises:
        FileNotFoundError: If the PDF doesn't exist.
        RuntimeError: If lpr is missing, times out, or rejects the job.
    """
    pdf_path = Path(pdf_path)
    if not pdf_path.exists():
        raise FileNotFoundError(f"File not found: {pdf_path}")
    _require("lpr")

    cmd = ["lpr", "-o", "media=A4", "-#", str(max(copies, 1))]
    if printer_name:
        cmd += ["-P", printer_name]
    cmd.append(str(pdf_path))

    try:
        result = subprocess.run(cmd, capture_output=True, text=True, timeout=30)
    except subprocess.TimeoutExpired:
        raise RuntimeError("Print job timed out.")
    if result.returncode != 0:
        raise RuntimeError(f"Printing failed: {result.stderr.strip()}")
    logger.info("Queued %s on %s", pdf_path.name, printer_name or "default printer")
