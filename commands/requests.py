from dataclasses import dataclass
from typing import Optional

ONE_MILLION = 1000000

CHOICE_YES = "yes"
CHOICE_NO = "no"
CHOICE_MAYBE = "maybe..."
CHOICES = (CHOICE_YES, CHOICE_NO, CHOICE_MAYBE)


class AnswerValidationError(ValueError):
    """The options sent with /mdb answer don't make a valid answer. The message is shown to the user."""


@dataclass(frozen=True)
class AnswerRequest:
    offer: int
    question_id: Optional[str] = None  # None = answer the most recently asked question

    @classmethod
    def from_options(
        cls,
        choice: str,
        counter_offer: Optional[int] = None,
        question_id: Optional[str] = None,
        min_counter_offer: int = 1,
        max_counter_offer: int = 5000000,
    ) -> "AnswerRequest":
        """
        Turns the raw /mdb answer options into a request.
        A counter-offer is only looked at when the choice is maybe...
        Raises:
            AnswerValidationError: unknown choice, missing or out of range counter-offer
        """
        if choice == CHOICE_YES:
            offer = ONE_MILLION
        elif choice == CHOICE_NO:
            offer = 0
        elif choice == CHOICE_MAYBE:
            if counter_offer is None:
                raise AnswerValidationError("Make sure to include your `counter_offer` if you're answering `maybe...`!")
            if not min_counter_offer <= counter_offer <= max_counter_offer:
                raise AnswerValidationError(
                    f"Your `counter_offer` must be between `{min_counter_offer}` and `{max_counter_offer}` dollars."
                )
            offer = counter_offer
        else:
            raise AnswerValidationError(f"What are you trying to do? You gotta answer with `yes`, `no`, or `maybe...`, not `{choice}`.")

        if question_id is not None:
            question_id = question_id.strip() or None
        return cls(offer=offer, question_id=question_id)
