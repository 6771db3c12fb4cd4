import pytest

from app import app as flask_app
from prediction import PredictionInput


@pytest.fixture
def client():
    flask_app.config["TESTING"] = True
    with flask_app.test_client() as c:
        yield c


@pytest.fixture
def sample_input():
    # 30 students, 5 done, 3 of 14 days left
    return PredictionInput(
        total_students=30,
        fulfilled_students=5,
        days_left=3,
        total_days=14,
    )


@pytest.fixture
def sample_form():
    return {"students": "30", "fulfilled": "5", "days_left": "3", "total_days": "14"}
