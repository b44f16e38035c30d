import pytest

from storage.storage import Storage

QUESTIONS = {
    "0": "you can never use a touchscreen again.",
    "1": "all of your socks are permanently slightly damp.",
    "2": "you must wear a cape in public for the rest of your life.",
    "3": "you can never eat pizza again.",
    "4": "a pigeon follows you wherever you go outdoors.",
}


@pytest.fixture
def questions():
    return dict(QUESTIONS)


@pytest.fixture
def stats_path(tmp_path):
    return str(tmp_path / "stats.json")


@pytest.fixture
def storage(stats_path, questions):
    return Storage(stats_path, questions)
