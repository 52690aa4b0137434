import threading
from collections import Counter

from sitemap_checker.url_queue import UrlQueue


def test_pop_front_in_order_then_none():
    queue = UrlQueue(["a", "b"])

    assert queue.pop_front() == "a"
    assert queue.pop_front() == "b"
    assert queue.pop_front() is None
    assert len(queue) == 0


def test_peek_does_not_mutate():
    queue = UrlQueue(["a", "b", "c"])

    assert queue.peek(2) == ["a", "b"]
    assert queue.peek(10) == ["a", "b", "c"]
    assert len(queue) == 3


def test_concurrent_pops_hand_out_each_url_once():
    urls = [f"https://a.test/{i}" for i in range(2000)]
    queue = UrlQueue(urls)
    popped = []
    popped_lock = threading.Lock()

    def drain():
        local = []
        while True:
            url = queue.pop_front()
            if url is None:
                break
            local.append(url)
        with popped_lock:
            popped.extend(local)

    threads = [threading.Thread(target=drain) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert Counter(popped) == Counter(urls)
    assert len(queue) == 0
