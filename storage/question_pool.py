import secrets
import yaml
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Optional

from storage.errors import (
    NoSuchQuestionIdError,
    NoQuestionsAskedError,
    NoMoreRemainingQuestionsError,
    QuestionCorpusError,
)
from utility.rwlock import ReadWriteLock
from utility.logger import get_logger
log = get_logger()


@dataclass(frozen=True)
class Question:
    id: str
    text: str


def load_questions(file_path: str) -> Dict[str, str]:
    """
    Load the question corpus from a YAML mapping of id -> text.
    Args:
        file_path (str): Path to the YAML file.
    Returns:
        Dict[str, str]: The questions, keyed by string id.
    """
    try:
        with open(file_path, "r", encoding="utf-8") as file:
            data = yaml.safe_load(file)
    except OSError as e:
        raise QuestionCorpusError(f"Can't read questions file {file_path}: {e}") from e
    except yaml.YAMLError as e:
        raise QuestionCorpusError(f"Can't parse questions file {file_path}: {e}") from e
    return validate_questions(data)


def validate_questions(data) -> Dict[str, str]:
    """Ids have to be exactly "0".."N-1" since selection probes them by index."""
    if not isinstance(data, dict):
        raise QuestionCorpusError(f"Questions must be a mapping of id -> text, got {type(data).__name__}")

    questions = {str(question_id): text for question_id, text in data.items()}
    expected = {str(i) for i in range(len(questions))}
    if set(questions) != expected:
        unexpected = sorted(set(questions) - expected)
        raise QuestionCorpusError(f"Question ids must run from 0 to {len(questions) - 1}, unexpected ids: {unexpected}")
    for question_id, text in questions.items():
        if not isinstance(text, str) or not text.strip():
            raise QuestionCorpusError(f"Question {question_id} has no text")
    return questions


class QuestionPool:
    def __init__(self, questions: Dict[str, str]):
        self._questions = validate_questions(questions)
        self._lock = ReadWriteLock()
        self._asked = set()
        self._most_recent_id: Optional[str] = None

    def __len__(self):
        return len(self._questions)

    def get_question(self, question_id: str) -> Question:
        # The corpus never changes after construction, no lock needed
        text = self._questions.get(question_id)
        if text is None:
            raise NoSuchQuestionIdError(question_id)
        return Question(id=question_id, text=text)

    def has_question_been_asked(self, question_id: str) -> bool:
        with self._lock.read_locked():
            return question_id in self._asked

    def get_most_recent_question_id(self) -> str:
        with self._lock.read_locked():
            if self._most_recent_id is None:
                raise NoQuestionsAskedError()
            return self._most_recent_id

    def mark_asked(self, question_ids: Iterable[str]):
        with self._lock.write_locked():
            self._asked.update(question_ids)

    def mark_asked_from(self, load_question_ids: Callable[[], Iterable[str]]):
        """
        Calls load_question_ids while holding the pool lock and marks whatever it returns as asked.
        No question can be selected between the load and the marking.
        """
        with self._lock.write_locked():
            self._asked.update(load_question_ids())

    def remaining_count(self) -> int:
        with self._lock.read_locked():
            return sum(1 for question_id in self._questions if question_id not in self._asked)

    def get_unasked_question(self) -> Question:
        """
        Pick a random question nobody has been asked yet.

        Starts at a random index and walks forward (wrapping around) until it finds an
        unasked one, so it takes at most len(pool) probes.
        Raises:
            NoMoreRemainingQuestionsError: every question has been asked
        """
        with self._lock.write_locked():
            count = len(self._questions)
            if count == 0:
                raise NoMoreRemainingQuestionsError()

            start = secrets.randbelow(count)
            for offset in range(count):
                question_id = str((start + offset) % count)
                if question_id not in self._asked:
                    break
            else:
                raise NoMoreRemainingQuestionsError()

            self._asked.add(question_id)
            self._most_recent_id = question_id
            log.debug(f"Asking question {question_id} (probed {offset + 1} of {count})")
            return Question(id=question_id, text=self._questions[question_id])
