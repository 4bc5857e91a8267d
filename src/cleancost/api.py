from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

from .cli import run as run_pipeline
from .config import load_config

# Options that replace the default artifact names are dropped with an output dir.
_PER_FILE_OVERRIDES = ("CLEANCOST_OUTPUT_XLSX", "CLEANCOST_OUTPUT_JSON")


@dataclass
class EstimateOptions:
    """Inputs for one estimator run; ``None`` leaves the environment value in place."""

    job_path: Optional[Path] = None
    output_dir: Optional[Path] = None
    markup_percent: Optional[float] = None
    markdown_percent: Optional[float] = None

    def env_overrides(self) -> Dict[str, str]:
        overrides: Dict[str, str] = {}
        if self.job_path:
            overrides["CLEANCOST_JOB"] = str(self.job_path)
        if self.output_dir:
            overrides["CLEANCOST_OUTPUT_DIR"] = str(self.output_dir)
        if self.markup_percent is not None or self.markdown_percent is not None:
            overrides["CLEANCOST_MARKUP_PCT"] = str(self.markup_percent or 0)
            overrides["CLEANCOST_MARKDOWN_PCT"] = str(self.markdown_percent or 0)
        return overrides


def estimate(options: EstimateOptions) -> Dict[str, Path]:
    """Price the configured job and return the workbook and JSON draft paths."""

    env = {key: value for key, value in os.environ.items()}
    if options.output_dir:
        for key in _PER_FILE_OVERRIDES:
            env.pop(key, None)
    env.update(options.env_overrides())

    cfg = load_config(env, None)
    rc = run_pipeline(runtime_config=cfg)
    if rc != 0:
        raise RuntimeError(f"Estimator run failed with code {rc}")
    return {"xlsx": cfg.output_xlsx, "json": cfg.output_json}
