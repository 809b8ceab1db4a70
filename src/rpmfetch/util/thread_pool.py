__all__ = ("map_async",)

import queue
import threading
from collections import deque
from multiprocessing import cpu_count

_sentinel = object()


def map_async(iterable, functor, threads=None):
    """Apply ``functor`` to every item using a bounded pool of threads.

    All items are queued up front; workers drain the queue until they hit an
    end marker. Results come back in completion order. If ``functor`` raises,
    the remaining workers stop pulling new items and the first exception is
    reraised once every thread is done.
    """
    if threads is None:
        threads = cpu_count()
    items = list(iterable)
    # if there are less items than parallelism, don't spawn pointless threads
    parallelism = max(min(len(items), threads), 0)

    q = queue.Queue()
    for item in items:
        q.put(item)
    for _ in range(parallelism):
        q.put(_sentinel)

    results = deque()
    failures = deque()
    kill = threading.Event()

    def worker():
        while not kill.is_set():
            item = q.get()
            if item is _sentinel:
                return
            try:
                results.append(functor(item))
            except BaseException as e:
                failures.append(e)
                kill.set()

    workers = [threading.Thread(target=worker) for _ in range(parallelism)]
    for t in workers:
        t.start()
    for t in workers:
        t.join()

    if failures:
        raise failures[0]
    return list(results)
