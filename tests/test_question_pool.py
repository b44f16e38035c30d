import secrets
from concurrent.futures import ThreadPoolExecutor

import pytest

from storage.errors import (
    NoMoreRemainingQuestionsError,
    NoQuestionsAskedError,
    NoSuchQuestionIdError,
    NotFoundError,
    ExhaustedError,
    QuestionCorpusError,
)
from storage.question_pool import Question, QuestionPool, load_questions, validate_questions


@pytest.fixture
def pool(questions):
    return QuestionPool(questions)


def fix_random_start(monkeypatch, start):
    monkeypatch.setattr(secrets, "randbelow", lambda n: start)


class TestGetQuestion:
    def test_known_id(self, pool, questions):
        assert pool.get_question("3") == Question(id="3", text=questions["3"])

    def test_unknown_id(self, pool):
        with pytest.raises(NoSuchQuestionIdError):
            pool.get_question("99")

    def test_lookup_does_not_mark_asked(self, pool):
        pool.get_question("1")
        assert not pool.has_question_been_asked("1")


class TestGetUnaskedQuestion:
    def test_asks_every_question_once_then_runs_out(self, pool, questions):
        asked = [pool.get_unasked_question().id for _ in range(len(questions))]
        assert sorted(asked) == sorted(questions)
        with pytest.raises(NoMoreRemainingQuestionsError):
            pool.get_unasked_question()

    def test_exhausted_is_its_own_kind(self, pool, questions):
        pool.mark_asked(questions)
        with pytest.raises(ExhaustedError):
            pool.get_unasked_question()

    def test_marks_asked_and_most_recent(self, pool):
        question = pool.get_unasked_question()
        assert pool.has_question_been_asked(question.id)
        assert pool.get_most_recent_question_id() == question.id

    def test_uses_random_start_when_free(self, pool, monkeypatch):
        fix_random_start(monkeypatch, 2)
        assert pool.get_unasked_question().id == "2"

    def test_probes_forward_past_asked(self, pool, monkeypatch):
        pool.mark_asked(["2", "3"])
        fix_random_start(monkeypatch, 2)
        assert pool.get_unasked_question().id == "4"

    def test_probe_wraps_around(self, pool, monkeypatch):
        pool.mark_asked(["4", "0", "1"])
        fix_random_start(monkeypatch, 4)
        assert pool.get_unasked_question().id == "2"

    def test_empty_pool(self):
        with pytest.raises(NoMoreRemainingQuestionsError):
            QuestionPool({}).get_unasked_question()

    def test_concurrent_selection_never_repeats(self):
        pool = QuestionPool({str(i): f"question {i}" for i in range(200)})
        with ThreadPoolExecutor(max_workers=16) as executor:
            ids = list(executor.map(lambda _: pool.get_unasked_question().id, range(200)))
        assert len(set(ids)) == 200
        assert pool.remaining_count() == 0


class TestMostRecent:
    def test_nothing_asked_yet(self, pool):
        with pytest.raises(NoQuestionsAskedError):
            pool.get_most_recent_question_id()

    def test_nothing_asked_is_not_found(self, pool):
        with pytest.raises(NotFoundError):
            pool.get_most_recent_question_id()

    def test_marking_asked_does_not_set_most_recent(self, pool):
        pool.mark_asked(["1"])
        with pytest.raises(NoQuestionsAskedError):
            pool.get_most_recent_question_id()

    def test_tracks_latest(self, pool):
        pool.get_unasked_question()
        second = pool.get_unasked_question()
        assert pool.get_most_recent_question_id() == second.id


def test_remaining_count(pool, questions):
    assert len(pool) == len(questions)
    pool.mark_asked(["0", "1", "not-in-pool"])
    assert pool.remaining_count() == len(questions) - 2
    assert pool.has_question_been_asked("not-in-pool")


class TestCorpus:
    def test_integer_keys_become_strings(self):
        assert validate_questions({0: "a", 1: "b"}) == {"0": "a", "1": "b"}

    @pytest.mark.parametrize("data", [
        ["a", "b"],
        {"0": "a", "2": "b"},
        {"1": "a"},
        {"0": ""},
        {"0": None},
    ])
    def test_rejects_bad_corpus(self, data):
        with pytest.raises(QuestionCorpusError):
            validate_questions(data)

    def test_loads_yaml(self, tmp_path):
        path = tmp_path / "questions.yaml"
        path.write_text('"0": "first"\n"1": "second"\n', encoding="utf-8")
        assert load_questions(str(path)) == {"0": "first", "1": "second"}

    def test_unparseable_yaml(self, tmp_path):
        path = tmp_path / "questions.yaml"
        path.write_text('"0": [unclosed\n', encoding="utf-8")
        with pytest.raises(QuestionCorpusError):
            load_questions(str(path))

    def test_missing_file(self, tmp_path):
        with pytest.raises(QuestionCorpusError):
            load_questions(str(tmp_path / "nope.yaml"))
