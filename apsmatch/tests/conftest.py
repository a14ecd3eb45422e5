import json

import pytest


CATALOGUE = [
    {
        "id": 2,
        "name": "Second University",
        "location": "Johannesburg",
        "ranking": 2,
        "faculties": [
            {
                "id": 21,
                "name": "Humanities",
                "degrees": [
                    {"id": 201, "name": "BA", "pointRequirement": 520, "subjectRequirements": []},
                    {"id": 202, "name": "BCom Accounting", "pointRequirement": 300,
                     "subjectRequirements": [{"subject": "Accounting", "minPoints": 60}]},
                ],
            }
        ],
    },
    {
        "id": 1,
        "name": "First University",
        "location": "Cape Town",
        "ranking": 1,
        "faculties": [
            {
                "id": 12,
                "name": "Science",
                "degrees": [
                    {"id": 102, "name": "BSc Computer Science", "pointRequirement": 430,
                     "subjectRequirements": [
                         {"subject": "Mathematics", "minPoints": 70},
                         {"subject": "English HL", "minPoints": 60, "orSubject": "English FAL"},
                     ]},
                ],
            },
            {
                "id": 11,
                "name": "Engineering",
                "degrees": [
                    {"id": 101, "name": "BSc Eng Mechanical", "pointRequirement": 480,
                     "pointCalculation": "Sum of percentages",
                     "subjectRequirements": [
                         {"subject": "Mathematics", "minPoints": 80},
                         {"subject": "Physical Science", "minPoints": 75},
                     ]},
                ],
            },
        ],
    },
]


# Raw total 505, APS 33 (Life Orientation does not count)
STORED_PROFILE = {
    "subjects": {
        "subject1": "Mathematics",
        "subject2": "English HL",
        "subject3": "Afrikaans FAL",
        "subject4": "Physical Science",
        "subject5": "History",
        "subject6": "Geography",
        "subject7": "Life Orientation",
    },
    "marks": {
        "mark1": "85",
        "mark2": "72",
        "mark3": "65",
        "mark4": "78",
        "mark5": "60",
        "mark6": "55",
        "mark7": "90",
    },
    "nbtScores": {"nbtAL": "64", "nbtQL": "", "nbtMAT": "58"},
}


@pytest.fixture
def catalogue_json():
    return json.loads(json.dumps(CATALOGUE))


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    (tmp_path / "universities.json").write_text(json.dumps(CATALOGUE), encoding="utf-8")
    monkeypatch.setenv("APSMATCH_DATA_DIR", str(tmp_path))
    return tmp_path


@pytest.fixture
def stored_profile():
    return json.loads(json.dumps(STORED_PROFILE))


@pytest.fixture(autouse=True)
def fresh_app_caches():
    from apsmatch.app import catalogue_repository, get_settings

    get_settings.cache_clear()
    catalogue_repository.cache_clear()
    yield
    get_settings.cache_clear()
    catalogue_repository.cache_clear()
