import os
import asyncio
import discord
from discord.ext import commands

import config.config as cfg
from storage.errors import StorageError
from storage.storage import Storage
from utility.logger import get_logger
log = get_logger()

COMMANDS_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "commands")


# ──────────────────────────
# Load Config Before Creating the Bot
# ──────────────────────────
async def load_config_early():
    log.info("############### Million Dollar Bot Start ###############")
    if not await cfg.load_config():
        log.error("ERROR: Failed to load configuration. An error occured. Exiting...")
        exit(1)  # Stop execution if config failed to load
    if cfg.config is None:
        log.error("ERROR: Failed to load configuration. config is None Exiting...")
        exit(1)

def create_storage() -> Storage:
    try:
        return Storage.from_config(cfg.config, base_dir=cfg.config_dir)
    except StorageError as e:
        log.error(f"ERROR: Failed to set up storage: {e}. Exiting...")
        exit(1)  # Don't run on partial state

def register_all_commands(bot, storage, commands_dir=COMMANDS_DIR):
    """Register commands from every .py file in the commands folder that has a register_commands()."""
    for filename in sorted(os.listdir(commands_dir)):
        if filename.endswith(".py") and not filename.startswith("_"):
            module_name = filename[:-3]  # Remove .py extension
            module = __import__(f"commands.{module_name}", fromlist=["register_commands"])
            if hasattr(module, "register_commands"):
                module.register_commands(bot, storage)
                log.debug(f"Registered commands from {module_name}")
            else:
                log.debug(f"No register_commands() in {module_name}, skipping.")

def create_bot(storage: Storage) -> commands.Bot:
    intents = discord.Intents.default()
    intents.message_content = False
    bot = commands.Bot(command_prefix="!", intents=intents)
    register_all_commands(bot, storage)

    async def start_tasks():
        import tasks.autosave_tasks as autosave_tasks
        if not autosave_tasks.autosave_stats_task.is_running():
            autosave_tasks.autosave_stats_task.change_interval(minutes=cfg.config.storage.autosave_interval_min)
            autosave_tasks.autosave_stats_task.start(storage)

    # ──────────────────────────
    # Bot Lifecycle
    # ──────────────────────────
    @bot.event
    async def on_ready():
        if cfg.config.bot.sync_commands:
            try:
                log.info("Attempting to sync commands...")
                if cfg.config.bot.guild_id:
                    guild = discord.Object(id=cfg.config.bot.guild_id)
                    bot.tree.copy_global_to(guild=guild)
                    synced_commands = await bot.tree.sync(guild=guild)
                else:
                    synced_commands = await bot.tree.sync()
                log.info(f"Synced {len(synced_commands)} commands.")
            except discord.DiscordException as e:
                log.error(f"Error syncing slash commands: {e}")
        else:
            log.info("Skipping commands sync.")

        await start_tasks()
        log.info(f"Logged in as {bot.user} (ID: {bot.user.id})")

    return bot

def main():
    asyncio.run(load_config_early())
    storage = create_storage()
    bot = create_bot(storage)
    bot.run(cfg.config.bot.bot_token, log_handler=None)

    # bot.run only returns once the bot has shut down
    log.info("Bot stopped, saving stats...")
    try:
        storage.save_stats()
    except StorageError as e:
        log.error(f"Failed to save stats on shutdown: {e}")
        exit(1)
    log.info("Gracefully shut down.")

if __name__ == "__main__":
    main()
