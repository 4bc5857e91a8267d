from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

import pandas as pd

from .job_io import job_to_dict
from .models import AdjustmentResult, EstimateBreakdown, JobDescription
from .reporting import line_item_frame, pressure_washing_frame, totals_frame

logger = logging.getLogger(__name__)


def write_outputs(
    breakdown: EstimateBreakdown,
    xlsx_path: str | Path,
    json_path: str | Path,
    adjustment: Optional[AdjustmentResult] = None,
    job: Optional[JobDescription] = None,
) -> None:
    """Write the breakdown workbook and the JSON estimate draft."""

    xlsx_path = Path(xlsx_path)
    json_path = Path(json_path)
    xlsx_path.parent.mkdir(parents=True, exist_ok=True)
    json_path.parent.mkdir(parents=True, exist_ok=True)

    pressure = pressure_washing_frame(breakdown)
    with pd.ExcelWriter(xlsx_path, engine="openpyxl") as writer:
        line_item_frame(breakdown, adjustment).to_excel(writer, sheet_name="Line Items", index=False)
        totals_frame(breakdown, adjustment).to_excel(writer, sheet_name="Totals", index=False)
        if not pressure.empty:
            pressure.to_excel(writer, sheet_name="Pressure Washing", index=False)
    logger.debug("workbook written => %s", xlsx_path)

    draft = {
        "job": job_to_dict(job) if job is not None else None,
        "breakdown": breakdown.as_dict(),
        "adjustment": adjustment.as_dict() if adjustment is not None else None,
    }
    with open(json_path, "w", encoding="utf-8") as fh:
        json.dump(draft, fh, indent=2)
    logger.debug("estimate draft written => %s", json_path)
