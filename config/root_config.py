from dataclasses import dataclass, field
from typing import List

@dataclass
class BotConfig:
    bot_token: str = ""
    guild_id: int = 0  # 0 = register commands globally, otherwise sync to this test guild only
    sync_commands: bool = True
    discord_char_limit: int = 2000
    admin_users: List[int] = field(default_factory=list)

@dataclass
class StorageConfig:
    stats_save_path: str = "_data/stats.json"
    overwrite_save: bool = True
    questions_path: str = "data/questions.yaml"
    autosave_interval_min: int = 15

@dataclass
class GameConfig:
    min_counter_offer: int = 1
    max_counter_offer: int = 5000000
    leaderboard_size: int = 10

    def __post_init__(self):
        """ Make sure the counter-offer range makes sense before Discord gets to see it. """
        if self.min_counter_offer < 0:
            raise ValueError(f"min_counter_offer can't be negative: {self.min_counter_offer}")
        if self.max_counter_offer < self.min_counter_offer:
            raise ValueError(f"max_counter_offer ({self.max_counter_offer}) is below min_counter_offer ({self.min_counter_offer})")

@dataclass
class Config:
    bot: BotConfig = field(default_factory=BotConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    game: GameConfig = field(default_factory=GameConfig)
