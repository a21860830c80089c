"""Unit tests for backup structure validation and file naming."""

import copy
from datetime import datetime, timezone

import pytest

from resumex.contexts.storage.backup import backup_filename, validate_backup_data

VALID_BACKUP = {
    "state": {
        "resumes": {
            "r1": {
                "id": "r1",
                "title": "我的简历",
                "profile": {"name": "李明"},
                "modules": [
                    {"id": "m1", "type": "experience", "title": "工作经历", "items": []},
                    {"id": "m2", "type": "skills", "title": "技能特长", "items": [{"id": "s1", "name": "Go"}]},
                ],
            }
        },
        "activeResumeId": "r1",
    },
    "version": 0,
}


def _mutated(mutate):
    data = copy.deepcopy(VALID_BACKUP)
    mutate(data)
    return data


@pytest.mark.unit
def test_valid_backup_accepted():
    """Test a well-formed backup passes validation."""
    assert validate_backup_data(VALID_BACKUP)


@pytest.mark.unit
def test_dangling_active_id_still_accepted():
    """Test activeResumeId is not checked; the store repairs it on load."""
    data = _mutated(lambda d: d["state"].update(activeResumeId="missing"))
    assert validate_backup_data(data)


@pytest.mark.unit
@pytest.mark.parametrize(
    "value",
    [None, [], "state", 42, {}, {"state": None}, {"state": {}}, {"state": {"resumes": []}}, {"state": {"resumes": {}}}],
)
def test_missing_state_rejected(value):
    """Test values without a non-empty state.resumes object are rejected."""
    assert not validate_backup_data(value)


@pytest.mark.unit
@pytest.mark.parametrize(
    "mutate",
    [
        lambda d: d["state"]["resumes"]["r1"].pop("id"),
        lambda d: d["state"]["resumes"]["r1"].pop("profile"),
        lambda d: d["state"]["resumes"]["r1"].pop("modules"),
        lambda d: d["state"]["resumes"]["r1"].update(id=""),
        lambda d: d["state"]["resumes"]["r1"].update(profile="李明"),
        lambda d: d["state"]["resumes"]["r1"]["profile"].update(name=None),
        lambda d: d["state"]["resumes"]["r1"].update(modules={}),
        lambda d: d["state"]["resumes"]["r1"]["modules"].append("experience"),
        lambda d: d["state"]["resumes"]["r1"]["modules"][0].pop("id"),
        lambda d: d["state"]["resumes"]["r1"]["modules"][0].update(type=3),
        lambda d: d["state"]["resumes"]["r1"]["modules"][0].update(items=None),
        lambda d: d["state"]["resumes"].update(r2="not a résumé"),
        lambda d: d["state"]["resumes"]["r1"]["modules"][0].update(type="awards"),
        lambda d: d["state"]["resumes"]["r1"]["modules"][0]["items"].append({"id": "i1"}),
        lambda d: d["state"]["resumes"]["r1"]["modules"][1]["items"].append({"id": "s2", "title": "Rust"}),
        lambda d: d["state"]["resumes"]["r1"].update(settings={"fontSizeScale": "large"}),
        lambda d: d["state"]["resumes"]["r1"].update(settings={"fontSizeScale": 0}),
        lambda d: d["state"]["resumes"]["r1"].update(lastModified=float("nan")),
    ],
)
def test_malformed_resume_rejected(mutate):
    """Test each defect the document model would refuse to load is rejected."""
    assert not validate_backup_data(_mutated(mutate))


@pytest.mark.unit
def test_backup_filename_uses_utc_date():
    """Test backup files are named after today's UTC date."""
    today = datetime.now(timezone.utc).strftime("%Y-%m-%d")
    assert backup_filename() == f"简历备份_{today}.json"
