import os
from typing import Dict, List, Tuple, Union

from storage.player_stats import PlayerStats, PlayerStatsStore
from storage.question_pool import Question, QuestionPool, load_questions
from utility.logger import get_logger
log = get_logger()


class Storage:
    """
    Everything the commands need to run the game: player totals and the question pool.

    The two halves have separate locks, a slow stats save never holds up /mdb question.
    """

    def __init__(self, stats_save_path: str, questions: Union[str, Dict[str, str]], overwrite_save: bool = True):
        """
        Args:
            stats_save_path (str): JSON file the player stats are loaded from and saved to.
            questions (str | dict): Path to the YAML question corpus, or the corpus itself.
            overwrite_save (bool): Whether saving may replace an existing stats file.
        Raises:
            QuestionCorpusError: the corpus can't be read or has bad ids
            StorageIOError, StatsDecodeError: the stats file exists but can't be loaded
        """
        if isinstance(questions, str):
            questions = load_questions(questions)
        self.questions = QuestionPool(questions)
        self.stats = PlayerStatsStore(stats_save_path, overwrite=overwrite_save)
        self.load_stats()
        log.info(f"Storage ready: {len(self.questions)} questions, {self.stats.player_count()} players")

    @classmethod
    def from_config(cls, config, base_dir: str = "") -> "Storage":
        """Relative paths in the config are resolved against base_dir, usually the config file's directory."""
        return cls(
            stats_save_path=os.path.join(base_dir, os.path.expanduser(config.storage.stats_save_path)),
            questions=os.path.join(base_dir, os.path.expanduser(config.storage.questions_path)),
            overwrite_save=config.storage.overwrite_save,
        )

    # ──────────────────────────
    # Player stats
    # ──────────────────────────
    def get_stats(self, player_id: str) -> PlayerStats:
        return self.stats.get_stats(player_id)

    def update_stats(self, question_id: str, player_id: str, offer: int) -> PlayerStats:
        return self.stats.update_stats(question_id, player_id, offer)

    def save_stats(self):
        self.stats.save_stats()

    def load_stats(self):
        """
        Reloads stats from disk. Every question anyone has answered counts as asked.
        Lock order is always questions then stats.
        """
        def load_answered_ids():
            self.stats.load_stats()
            return self.stats.answered_question_ids()

        self.questions.mark_asked_from(load_answered_ids)

    def leaderboard(self, limit: int = 10) -> List[Tuple[str, PlayerStats]]:
        return self.stats.leaderboard(limit)

    # ──────────────────────────
    # Questions
    # ──────────────────────────
    def get_question(self, question_id: str) -> Question:
        return self.questions.get_question(question_id)

    def get_most_recent_question_id(self) -> str:
        return self.questions.get_most_recent_question_id()

    def get_unasked_question(self) -> Question:
        return self.questions.get_unasked_question()

    def has_question_been_asked(self, question_id: str) -> bool:
        return self.questions.has_question_been_asked(question_id)

    def remaining_question_count(self) -> int:
        return self.questions.remaining_count()
