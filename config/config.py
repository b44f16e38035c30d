import os
import yaml

from config.root_config import *
from utility.logger import get_logger
log = get_logger()

CONFIG_FILE = "config.yaml"
config = None
config_dir = ""  # Directory of the loaded config file, relative paths in it are resolved from here

# ──────────────────────────
# Configuration Helper Functions
# ──────────────────────────
async def load_config(file_path: str = CONFIG_FILE) -> bool:
    """
    Load the configuration from a YAML file into the module level Config dataclass.
    Args:
        file_path (str): Path to the YAML file.
    Returns:
        bool: False if the file exists but couldn't be loaded.
    """
    global config, config_dir
    config_dir = os.path.dirname(os.path.abspath(file_path))
    if not os.path.exists(file_path):
        log.warning(f"Config file {file_path} not found. Using defaults.")
        config = Config()
        return True
    try:
        log.debug("Loading config...")
        with open(file_path, "r") as file:
            data = yaml.safe_load(file) or {}
        config = Config(
            bot=BotConfig(**(data.get("bot") or {})),
            storage=StorageConfig(**(data.get("storage") or {})),
            game=GameConfig(**(data.get("game") or {})),
        )
    except Exception as e:
        config = Config()
        log.error(f"Failed to load config: {e}")
        return False
    log.info("Finished loading config")
    return True

def save_config(file_path: str = CONFIG_FILE):
    """
    Save the Config dataclass to a YAML file.
    Args:
        file_path (str): Path to the YAML file.
    """
    with open(file_path, "w") as file:
        yaml.dump(
            {
                "bot": {
                    **config.bot.__dict__,
                    "admin_users": list(config.bot.admin_users),
                },
                "storage": config.storage.__dict__,
                "game": config.game.__dict__,
            },
            file,
            default_flow_style=False,
        )
