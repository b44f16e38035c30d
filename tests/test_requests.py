import pytest

from commands.requests import AnswerRequest, AnswerValidationError, ONE_MILLION


def test_yes_is_a_million():
    assert AnswerRequest.from_options("yes").offer == ONE_MILLION


def test_no_is_zero():
    assert AnswerRequest.from_options("no").offer == 0


def test_counter_offer_ignored_unless_maybe():
    assert AnswerRequest.from_options("yes", counter_offer=5).offer == ONE_MILLION
    assert AnswerRequest.from_options("no", counter_offer=5).offer == 0


def test_maybe_uses_counter_offer():
    assert AnswerRequest.from_options("maybe...", counter_offer=2500000).offer == 2500000


def test_maybe_needs_counter_offer():
    with pytest.raises(AnswerValidationError, match="counter_offer"):
        AnswerRequest.from_options("maybe...")


@pytest.mark.parametrize("counter_offer", [0, 5000001, -3])
def test_counter_offer_range(counter_offer):
    with pytest.raises(AnswerValidationError):
        AnswerRequest.from_options("maybe...", counter_offer=counter_offer)


def test_custom_range():
    request = AnswerRequest.from_options("maybe...", counter_offer=0, min_counter_offer=0, max_counter_offer=10)
    assert request.offer == 0


def test_unknown_choice():
    with pytest.raises(AnswerValidationError):
        AnswerRequest.from_options("probably")


def test_question_id_defaults_to_most_recent():
    assert AnswerRequest.from_options("yes").question_id is None
    assert AnswerRequest.from_options("yes", question_id="   ").question_id is None
    assert AnswerRequest.from_options("yes", question_id=" 7 ").question_id == "7"
