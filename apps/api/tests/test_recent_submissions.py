import threading

from hrdesk.core.recent_submissions import RecentSubmissions


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def test_second_claim_within_window_is_rejected():
    clock = FakeClock()
    guard = RecentSubmissions(window_seconds=5, clock=clock)
    assert guard.claim(("Equipment", 1)) is True
    clock.now += 4.9
    assert guard.claim(("Equipment", 1)) is False
    assert guard.claim(("Equipment", 2)) is True


def test_claim_allowed_again_after_window():
    clock = FakeClock()
    guard = RecentSubmissions(window_seconds=5, clock=clock)
    guard.claim("key")
    clock.now += 5
    assert guard.claim("key") is True


def test_stale_entries_are_swept():
    clock = FakeClock()
    guard = RecentSubmissions(window_seconds=5, clock=clock)
    for i in range(10):
        guard.claim(i)
    assert len(guard) == 10
    clock.now += 6
    guard.claim("fresh")
    assert len(guard) == 1


def test_release_allows_immediate_retry():
    guard = RecentSubmissions(window_seconds=60)
    guard.claim("key")
    guard.release("key")
    assert guard.claim("key") is True


def test_only_one_concurrent_claim_wins():
    guard = RecentSubmissions(window_seconds=60)
    results = []
    barrier = threading.Barrier(8)

    def worker():
        barrier.wait()
        results.append(guard.claim(("Leave", 7)))

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert results.count(True) == 1
