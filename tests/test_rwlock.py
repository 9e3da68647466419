"""
Tests for the reader-writer lock and concurrent access to the config store
"""

import threading

import pytest

from dnsguard.core.rwlock import ReadWriteLock
from dnsguard.services.filter_service import FilterService


def test_readers_share_the_lock():
    """Test several readers hold the lock at the same time"""
    lock = ReadWriteLock()
    both_inside = threading.Barrier(2, timeout=5)
    errors = []

    def reader():
        with lock.read_locked():
            try:
                both_inside.wait()
            except threading.BrokenBarrierError as e:
                errors.append(e)

    threads = [threading.Thread(target=reader) for _ in range(2)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(5)

    assert errors == []
    assert lock.readers == 0


def test_writer_excludes_readers():
    """Test a reader waits until the writer releases the lock"""
    lock = ReadWriteLock()
    entered = threading.Event()

    def reader():
        with lock.read_locked():
            entered.set()

    lock.acquire_write()
    t = threading.Thread(target=reader)
    t.start()
    assert not entered.wait(0.2)

    lock.release_write()
    assert entered.wait(5)
    t.join(5)


def test_writer_waits_for_readers():
    """Test a writer waits until all readers are gone"""
    lock = ReadWriteLock()
    acquired = threading.Event()

    def writer():
        with lock.write_locked():
            acquired.set()

    lock.acquire_read()
    t = threading.Thread(target=writer)
    t.start()
    assert not acquired.wait(0.2)

    lock.release_read()
    assert acquired.wait(5)
    t.join(5)
    assert not lock.write_held


def test_release_without_acquire():
    lock = ReadWriteLock()
    with pytest.raises(RuntimeError):
        lock.release_read()
    with pytest.raises(RuntimeError):
        lock.release_write()


def test_lock_released_on_error():
    lock = ReadWriteLock()
    with pytest.raises(ValueError):
        with lock.write_locked():
            raise ValueError("boom")
    assert not lock.write_held


def test_concurrent_filter_additions(config_service):
    """Test concurrent mutations never hand out the same filter id"""
    filter_service = FilterService(config_service)
    errors = []

    def add(n):
        try:
            filter_service.add_filter(f"https://example.org/list-{n}.txt", f"List {n}")
        except Exception as e:
            errors.append(e)

    threads = [threading.Thread(target=add, args=(n,)) for n in range(20)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(10)

    assert errors == []
    ids = [f.id for f in config_service.snapshot().filters]
    assert len(ids) == 24
    assert len(set(ids)) == 24


def test_readers_see_whole_updates(config_service):
    """Test readers never observe half of an update"""
    stop = threading.Event()
    torn = []

    def reader():
        while not stop.is_set():
            with config_service.read() as config:
                if config.bind_port != config.dns.port + 1000:
                    torn.append((config.bind_port, config.dns.port))

    with config_service.update(persist=False) as config:
        config.dns.port = 2000
        config.bind_port = 3000

    t = threading.Thread(target=reader)
    t.start()
    for port in range(2001, 2101):
        with config_service.update(persist=False) as config:
            config.dns.port = port
            config.bind_port = port + 1000
    stop.set()
    t.join(5)

    assert torn == []


def test_first_run_set_under_lock(config_service):
    """Test changing first_run waits for an update in progress"""
    done = threading.Event()

    def set_flag():
        config_service.first_run = True
        done.set()

    with config_service.update(persist=False):
        t = threading.Thread(target=set_flag)
        t.start()
        assert not done.wait(0.2)

    assert done.wait(5)
    t.join(5)
    assert config_service.first_run is True
