import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Optional, Sequence

from dotenv import load_dotenv

from .adjustment import AdjustmentError, _percent, adjust_estimate
from .calculator import compute_estimate
from .config import Config
from .config import load_config as load_runtime_config
from .estimate_writer import write_outputs
from .job_io import load_job
from .project_meta import CLEANING_TYPE_LABELS, PROJECT_TYPE_LABELS
from .reporting import make_summary_text

BASE_DIR = Path(__file__).resolve().parents[2]

load_dotenv(BASE_DIR / ".env")

logger = logging.getLogger(__name__)


def run(runtime_config: Optional[Config] = None) -> int:
    runtime_cfg = runtime_config or load_runtime_config(os.environ, None)

    stage_counter = 0

    if not logging.getLogger().handlers:
        logging.basicConfig(level=logging.INFO, format="%(message)s")

    def log_stage(message: str) -> None:
        nonlocal stage_counter
        stage_counter += 1
        logger.info("[pipeline:%02d] %s", stage_counter, message)

    def log_detail(message: str) -> None:
        logger.info("           %s", message)

    job_path = runtime_cfg.job_path
    out_xlsx = runtime_cfg.output_xlsx
    out_json = runtime_cfg.output_json

    log_stage("Bootstrapping estimator runtime context")
    log_detail(f"output_dir={runtime_cfg.output_dir}")
    log_detail(f"artifact_targets={out_xlsx.name},{out_json.name}")
    log_detail(f"python_version={sys.version.split()[0]} | cwd={Path.cwd()}")

    log_stage(f"Loading job description from {job_path}")
    job = load_job(job_path)
    log_detail(
        f"project_type={job.project_type.value} | cleaning_type={job.cleaning_type.value} | "
        f"square_footage={job.square_footage:,.0f} | crew_size={job.crew_size}"
    )

    log_stage("Pricing line items")
    breakdown = compute_estimate(job)
    log_detail(f"service_category={breakdown.service_category.value}")
    log_detail(f"participating={','.join(item.value for item in breakdown.participating)}")

    adjustment = None
    if runtime_cfg.has_adjustment:
        log_stage(
            f"Applying {runtime_cfg.adjust_direction.value} of {runtime_cfg.adjust_percent:g}% "
            "across participating line items"
        )
        adjustment = adjust_estimate(breakdown, runtime_cfg.adjust_percent, runtime_cfg.adjust_direction)
        if adjustment.note:
            log_detail(adjustment.note)
        else:
            log_detail(
                f"adjustment_amount={adjustment.adjustment_amount:,.2f} | "
                f"window_transfer={adjustment.transfer_amount:,.2f}"
            )

    log_stage("Persisting estimator outputs to disk")
    write_outputs(breakdown, out_xlsx, out_json, adjustment=adjustment, job=job)
    log_detail(f"outputs_written => {out_xlsx}, {out_json}")

    logger.info("\n=== SUMMARY ===\n")
    logger.info("%s", make_summary_text(breakdown, adjustment))
    logger.info("\nInputs used:")
    logger.info(" - Job file: %s", job_path)
    if job.client_name or job.project_name:
        logger.info("   Client / project: %s / %s", job.client_name or "-", job.project_name or "-")
    logger.info("   Project type: %s", PROJECT_TYPE_LABELS[job.project_type])
    logger.info("   Cleaning type: %s", CLEANING_TYPE_LABELS[job.cleaning_type])
    logger.info("\nOutputs written:")
    logger.info(" - %s", out_xlsx)
    logger.info(" - %s", out_json)
    return 0


def _percent_arg(value: str) -> float:
    try:
        return _percent(value)
    except AdjustmentError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from None


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Price a commercial cleaning job and export the estimate")
    parser.add_argument("--job", help="Path to the job description JSON file")
    adjust = parser.add_mutually_exclusive_group()
    adjust.add_argument("--markup", type=_percent_arg, help="Markup percent spread across participating line items")
    adjust.add_argument("--markdown", type=_percent_arg, help="Markdown percent spread across participating line items")
    parser.add_argument("--output-dir", help="Directory for generated outputs")
    parser.add_argument("-v", "--verbose", action="store_true", help="Increase logging verbosity")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    runtime_cfg = load_runtime_config(os.environ, args)
    log_level = logging.DEBUG if runtime_cfg.verbose else logging.INFO
    logging.basicConfig(level=log_level, format="%(message)s")
    try:
        return run(runtime_config=runtime_cfg)
    except Exception:
        logger.exception("Fatal error during estimate generation")
        return 1


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
