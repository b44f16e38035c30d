import asyncio
import json

from storage.storage import Storage
from tasks.autosave_tasks import async_save_stats, autosave_stats_task


def test_async_save_writes_stats(storage, stats_path):
    storage.update_stats("0", "first", 1000000)
    asyncio.run(async_save_stats(storage))
    with open(stats_path, encoding="utf-8") as f:
        assert json.load(f) == {"first": {"answered": {"0": 1000000}}}


def test_failed_autosave_keeps_serving(stats_path, questions, caplog):
    with open(stats_path, "w", encoding="utf-8") as f:
        json.dump({}, f)
    storage = Storage(stats_path, questions, overwrite_save=False)
    storage.update_stats("0", "first", 5)

    asyncio.run(autosave_stats_task.coro(storage))

    assert "Failed to save stats" in caplog.text
    assert storage.get_stats("first").total_money == 5
