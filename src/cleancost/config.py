from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from types import SimpleNamespace
from typing import Mapping, Optional

from .adjustment import direction_for
from .models import AdjustmentDirection


_TRUTHY = frozenset({"1", "true", "yes", "y", "on"})


@dataclass(frozen=True)
class Config:
    """Runtime configuration assembled from environment variables and CLI options."""

    base_dir: Path
    job_path: Path
    output_dir: Path
    output_xlsx: Path
    output_json: Path
    adjust_percent: float = 0.0
    adjust_direction: AdjustmentDirection = AdjustmentDirection.MARKUP
    verbose: bool = False

    @property
    def has_adjustment(self) -> bool:
        return self.adjust_percent != 0


def _to_path(value: object | None) -> Optional[Path]:
    text = "" if value is None else str(value).strip()
    return Path(text).expanduser().resolve() if text else None


def _to_float(value: object | None) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    text = str(value).replace("$", "").replace(",", "").replace("%", "").strip()
    if not text:
        return None
    try:
        return float(text)
    except ValueError:
        return None


def _flag(value: object | None) -> bool:
    """Env/JSON switch: real booleans pass through, strings match ``_TRUTHY``."""

    if isinstance(value, bool):
        return value
    return value is not None and str(value).strip().lower() in _TRUTHY


def _namespace(cli_args: object | None) -> SimpleNamespace:
    if isinstance(cli_args, SimpleNamespace):
        return cli_args
    return SimpleNamespace(**vars(cli_args)) if hasattr(cli_args, "__dict__") else SimpleNamespace()


def load_config(env: Mapping[str, str], cli_args: object | None = None) -> Config:
    """Build a runtime :class:`Config` from environment variables and CLI options."""

    base_dir = Path(__file__).resolve().parents[2]
    default_job = (base_dir / "data_sample" / "sample_job.json").resolve()
    default_output_dir = (base_dir / "outputs").resolve()

    job_path = _to_path(env.get("CLEANCOST_JOB")) or default_job
    output_dir = _to_path(env.get("CLEANCOST_OUTPUT_DIR")) or default_output_dir
    output_xlsx = _to_path(env.get("CLEANCOST_OUTPUT_XLSX"))
    output_json = _to_path(env.get("CLEANCOST_OUTPUT_JSON"))
    markup_pct = _to_float(env.get("CLEANCOST_MARKUP_PCT"))
    markdown_pct = _to_float(env.get("CLEANCOST_MARKDOWN_PCT"))
    verbose = _flag(env.get("CLEANCOST_VERBOSE"))

    cli_ns = _namespace(cli_args)
    if getattr(cli_ns, "job", None):
        job_path = _to_path(cli_ns.job) or job_path
    if getattr(cli_ns, "output_dir", None):
        output_dir = _to_path(cli_ns.output_dir) or output_dir
        output_xlsx = None
        output_json = None
    # CLI markup/markdown replace the env pair as a unit.
    cli_markup = getattr(cli_ns, "markup", None)
    cli_markdown = getattr(cli_ns, "markdown", None)
    if cli_markup is not None or cli_markdown is not None:
        markup_pct = _to_float(cli_markup)
        markdown_pct = _to_float(cli_markdown)
    if getattr(cli_ns, "verbose", False):
        verbose = True

    adjust_percent, adjust_direction = direction_for(markup_pct, markdown_pct)

    return Config(
        base_dir=base_dir,
        job_path=job_path,
        output_dir=output_dir,
        output_xlsx=output_xlsx or (output_dir / "Estimate_Breakdown.xlsx").resolve(),
        output_json=output_json or (output_dir / "Estimate_Draft.json").resolve(),
        adjust_percent=adjust_percent,
        adjust_direction=adjust_direction,
        verbose=verbose,
    )


__all__ = ["Config", "load_config"]
