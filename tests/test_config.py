from pathlib import Path
from types import SimpleNamespace

import pytest

from cleancost.adjustment import AdjustmentError
from cleancost.config import _flag, _namespace, _to_float, _to_path, load_config
from cleancost.models import AdjustmentDirection


def test_defaults_point_at_sample_job_and_outputs():
    cfg = load_config({}, None)

    assert cfg.job_path == cfg.base_dir / "data_sample" / "sample_job.json"
    assert cfg.output_dir == cfg.base_dir / "outputs"
    assert cfg.output_xlsx.name == "Estimate_Breakdown.xlsx"
    assert cfg.output_json.name == "Estimate_Draft.json"
    assert cfg.adjust_percent == 0.0
    assert cfg.adjust_direction is AdjustmentDirection.MARKUP
    assert cfg.has_adjustment is False
    assert cfg.verbose is False


def test_environment_values(tmp_path):
    env = {
        "CLEANCOST_JOB": str(tmp_path / "job.json"),
        "CLEANCOST_OUTPUT_DIR": str(tmp_path / "out"),
        "CLEANCOST_OUTPUT_JSON": str(tmp_path / "draft.json"),
        "CLEANCOST_MARKDOWN_PCT": "12.5%",
        "CLEANCOST_VERBOSE": "on",
    }
    cfg = load_config(env, None)

    assert cfg.job_path == (tmp_path / "job.json").resolve()
    assert cfg.output_xlsx == (tmp_path / "out" / "Estimate_Breakdown.xlsx").resolve()
    assert cfg.output_json == (tmp_path / "draft.json").resolve()
    assert cfg.adjust_percent == 12.5
    assert cfg.adjust_direction is AdjustmentDirection.MARKDOWN
    assert cfg.verbose is True


def test_cli_arguments_override_environment(tmp_path):
    env = {
        "CLEANCOST_MARKDOWN_PCT": "20",
        "CLEANCOST_OUTPUT_XLSX": str(tmp_path / "env.xlsx"),
    }
    args = SimpleNamespace(job="other.json", output_dir=str(tmp_path / "cli"), markup=7.5, markdown=None, verbose=False)
    cfg = load_config(env, args)

    assert cfg.job_path == Path("other.json").resolve()
    assert cfg.output_xlsx == (tmp_path / "cli" / "Estimate_Breakdown.xlsx").resolve()
    assert cfg.adjust_percent == 7.5
    assert cfg.adjust_direction is AdjustmentDirection.MARKUP


def test_markup_wins_when_both_are_configured():
    cfg = load_config({"CLEANCOST_MARKUP_PCT": "5", "CLEANCOST_MARKDOWN_PCT": "10"}, None)
    assert cfg.adjust_percent == 5.0
    assert cfg.adjust_direction is AdjustmentDirection.MARKUP


def test_value_coercion_helpers():
    assert _to_float("$1,250.50") == 1250.5
    assert _to_float("") is None
    assert _to_float("n/a") is None
    assert _to_float(True) is None
    assert _flag("YES") is True
    assert _flag("0") is False
    assert _flag(None) is False
    assert _flag("y") is True
    assert _to_path("   ") is None
    assert _to_path(None) is None
    assert _namespace(None) == SimpleNamespace()


@pytest.mark.parametrize(
    "env",
    [{"CLEANCOST_MARKDOWN_PCT": "150"}, {"CLEANCOST_MARKUP_PCT": "-10"}],
)
def test_out_of_range_adjustment_is_rejected(env):
    with pytest.raises(AdjustmentError):
        load_config(env, None)
