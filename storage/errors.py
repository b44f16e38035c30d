
class StorageError(Exception):
    """Base class for everything the storage layer raises."""


# ──────────────────────────
# Not found
# ──────────────────────────
class NotFoundError(StorageError):
    pass

class NoSuchQuestionIdError(NotFoundError):
    def __init__(self, question_id: str):
        super().__init__(f"No question with id '{question_id}' exists in the question database")
        self.question_id = question_id

class NoQuestionsAskedError(NotFoundError):
    def __init__(self):
        super().__init__("No questions have been asked yet")


# ──────────────────────────
# Exhausted
# ──────────────────────────
class ExhaustedError(StorageError):
    pass

class NoMoreRemainingQuestionsError(ExhaustedError):
    def __init__(self):
        super().__init__("There are no remaining unasked questions")


# ──────────────────────────
# Persistence
# ──────────────────────────
class SaveConflictError(StorageError):
    def __init__(self, path: str):
        super().__init__(f"File {path} exists and overwrite was set to false")
        self.path = path

class StorageIOError(StorageError):
    def __init__(self, operation: str, path: str, reason):
        super().__init__(f"Error {operation} {path}: {reason}")
        self.operation = operation
        self.path = path

class StatsDecodeError(StorageError):
    def __init__(self, path: str, reason):
        super().__init__(f"Error decoding stats in {path}: {reason}")
        self.path = path

class QuestionCorpusError(StorageError):
    pass
