import threading

import pytest

from rpmfetch.util.thread_pool import map_async


class TestMapAsync:

    def test_results(self):
        assert sorted(map_async(range(20), lambda x: x * 2, threads=4)) == list(range(0, 40, 2))

    def test_empty(self):
        assert map_async([], lambda x: x, threads=4) == []

    def test_thread_count(self):
        seen = set()

        def functor(x):
            seen.add(threading.get_ident())
            return x

        map_async(range(2), functor, threads=8)
        assert 1 <= len(seen) <= 2

    def test_failure(self):
        def functor(x):
            if x == 3:
                raise ValueError(x)
            return x

        with pytest.raises(ValueError):
            map_async(range(10), functor, threads=2)
