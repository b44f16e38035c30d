import threading
import time

from utility.helper_functions import format_money, trim_to_char_limit
from utility.rwlock import ReadWriteLock


def test_format_money():
    assert format_money(0) == "$0"
    assert format_money(1234567) == "$1,234,567"


def test_trim_keeps_everything_that_fits():
    assert trim_to_char_limit(["a", "b"], 100, header="H\n") == "H\na\nb"


def test_trim_drops_lines_from_the_end():
    message = trim_to_char_limit(["aaaa", "bbbb", "cccc"], 12, header="H\n")
    assert message == "H\naaaa\n..."


def test_readers_share_the_lock():
    lock = ReadWriteLock()
    both_inside = threading.Barrier(2, timeout=5)

    def reader():
        with lock.read_locked():
            both_inside.wait()

    threads = [threading.Thread(target=reader) for _ in range(2)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=5)
    assert not both_inside.broken


def test_writer_excludes_readers():
    lock = ReadWriteLock()
    events = []

    def reader():
        with lock.read_locked():
            events.append("read")

    with lock.write_locked():
        thread = threading.Thread(target=reader)
        thread.start()
        time.sleep(0.05)
        events.append("write done")
    thread.join(timeout=5)
    assert events == ["write done", "read"]
