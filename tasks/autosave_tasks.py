import asyncio
from concurrent.futures import ThreadPoolExecutor
from discord.ext import tasks

from storage.errors import StorageError
from utility.logger import get_logger
log = get_logger()

# Saving does blocking file I/O, keep it off the event loop
executor = ThreadPoolExecutor(max_workers=1)

async def async_save_stats(storage):
    """
    Runs storage.save_stats in a separate thread.
    """
    loop = asyncio.get_running_loop()
    await loop.run_in_executor(executor, storage.save_stats)

@tasks.loop(minutes=15) # Real interval is set from config in bot.py before starting
async def autosave_stats_task(storage):
    """Periodically writes player stats to disk so a crash loses at most one interval of answers."""
    log.debug("Task autosave_stats_task: Running Task")
    try:
        await async_save_stats(storage)
    except StorageError as e:
        # Stats are still in memory, the next run (or shutdown) tries again
        log.error(f"Task autosave_stats_task: Failed to save stats: {e}")
