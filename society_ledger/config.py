"""TOML configuration loader for the society ledger."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    try:
        import tomli as tomllib
    except ImportError:
        tomllib = None  # type: ignore[assignment]


@dataclass
class DatabaseConfig:
    path: str = "~/.config/society-ledger/ledger.db"


@dataclass
class SocietyConfig:
    name: str = "ધી નીલકંઠ એપાર્ટમેન્ટ વિભાગ-૧"
    subtitle: str = "કો.ઓ.હાઉસિંગ સર્વિસ સોસાયટી લી."
    address: str = "વંદે માતરમ્ ચાર રસ્તા નજીક, અમદાવાદ | (બ્લોક ૧ થી ૬)"
    section: str = "વિભાગ-૧ (Section-1)"
    fiscal_year: str = "2025-26"


@dataclass
class ExportConfig:
    output_dir: str = "~/Downloads"


@dataclass
class GeminiConfig:
    api_key: str = ""
    model: str = "gemini-3-pro-preview"


@dataclass
class PrinterConfig:
    enabled: bool = False
    printer_name: str = ""


@dataclass
class LedgerConfig:
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    society: SocietyConfig = field(default_factory=SocietyConfig)
    export: ExportConfig = field(default_factory=ExportConfig)
    gemini: GeminiConfig = field(default_factory=GeminiConfig)
    printer: PrinterConfig = field(default_factory=PrinterConfig)


def load_config(path: str | Path | None = None) -> LedgerConfig:
    """Load configuration from a TOML file.

    Falls back to defaults if no path is given or the file doesn't exist.
    The Gemini API key can be supplied via the GEMINI_API_KEY environment
    variable instead.
    """
    raw: dict = {}

    if path is not None:
        p = Path(path)
        if p.exists():
            if tomllib is None:
                raise ImportError(
                    "tomli is required on Python < 3.11: pip install tomli"
                )
            with open(p, "rb") as f:
                raw = tomllib.load(f)

    dbs = raw.get("database", {})
    soc = raw.get("society", {})
    exp = raw.get("export", {})
    gem = raw.get("gemini", {})
    prn = raw.get("printer", {})

    defaults = SocietyConfig()

    # Resolve API key: config file → environment variable
    gemini_api_key = gem.get("api_key", "") or os.environ.get("GEMINI_API_KEY", "")

    return LedgerConfig(
        database=DatabaseConfig(
            path=dbs.get("path", DatabaseConfig.path),
        ),
        society=SocietyConfig(
            name=soc.get("name", defaults.name),
            subtitle=soc.get("subtitle", defaults.subtitle),
            address=soc.get("address", defaults.address),
            section=soc.get("section", defaults.section),
            fiscal_year=soc.get("fiscal_year", defaults.fiscal_year),
        ),
        export=ExportConfig(
            output_dir=exp.get("output_dir", ExportConfig.output_dir),
        ),
        gemini=GeminiConfig(
            api_key=gemini_api_key,
            model=gem.get("model", GeminiConfig.model),
        ),
        printer=PrinterConfig(
            enabled=prn.get("enabled", False),
            printer_name=prn.get("printer_name", ""),
        ),
    )
