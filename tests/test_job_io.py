import json

import pytest

from cleancost.job_io import job_from_dict, job_to_dict, load_job
from cleancost.models import CleaningType, PressureWashSurface, ProjectType
from cleancost.validation import JobValidationError


def _form_payload() -> dict:
    return {
        "projectType": "Jewelry Store",
        "cleaningType": "post_construction",
        "squareFootage": "2,400",
        "hasVCT": "yes",
        "distanceFromOffice": 35,
        "numberOfCleaners": 3,
        "urgencyLevel": "3",
        "needsPressureWashing": True,
        "pressureWashingServices": ["sidewalk", "patio"],
        "pressureWashingServiceAreas": {"sidewalk": 600, "patio": "400", "deck": 999},
        "needsWindowCleaning": "true",
        "chargeForWindowCleaning": False,
        "numberOfWindows": 18,
        "numberOfDisplayCases": 12,
        "clientName": "  Harbor Point  ",
    }


def test_job_from_form_payload():
    job = job_from_dict(_form_payload())

    assert job.project_type is ProjectType.JEWELRY_STORE
    assert job.cleaning_type is CleaningType.POST_CONSTRUCTION
    assert job.square_footage == 2400.0
    assert job.has_vct is True
    assert job.crew_size == 3
    assert job.urgency_level == 3
    assert job.needs_window_cleaning is True
    assert job.charge_for_window_cleaning is False
    assert job.display_cases == 12
    assert job.client_name == "Harbor Point"
    # only the selected surfaces are carried
    assert job.pressure_washing_services == {
        PressureWashSurface.SIDEWALK: 600.0,
        PressureWashSurface.PATIO: 400.0,
    }


def test_missing_crew_size_uses_recommendation():
    job = job_from_dict({"project_type": "office", "cleaning_type": "final", "square_footage": 12000})
    assert job.crew_size == 6
    assert job.charge_for_window_cleaning is True


def test_unknown_names_raise_validation_error():
    with pytest.raises(JobValidationError) as excinfo:
        job_from_dict({"project_type": "warehouse", "cleaning_type": "scrub", "square_footage": 100})
    assert len(excinfo.value.problems) == 2


def test_unknown_surface_is_rejected():
    payload = {
        "project_type": "office",
        "cleaning_type": "final",
        "square_footage": 100,
        "pressure_washing_services": {"roof": 100},
    }
    with pytest.raises(JobValidationError):
        job_from_dict(payload)


def test_job_dict_round_trip(tmp_path):
    job = job_from_dict(_form_payload())
    data = job_to_dict(job)
    assert data["project_type"] == "jewelry_store"
    assert data["pressure_washing_services"] == {"sidewalk": 600.0, "patio": 400.0}

    path = tmp_path / "job.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    assert load_job(path) == job


def test_load_job_requires_an_object(tmp_path):
    path = tmp_path / "job.json"
    path.write_text("[1, 2, 3]", encoding="utf-8")
    with pytest.raises(JobValidationError):
        load_job(path)
