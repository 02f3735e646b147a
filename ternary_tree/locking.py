"""Reader/writer lock guarding a tree shared between request threads."""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator


class RWLock:
    """
    Reader-writer lock with writer preference to avoid writer starvation.
    Usage:
        with rw.read_lock(): ...   # lookups, searches, iteration
        with rw.write_lock(): ...  # insert, remove, clear
    """

    def __init__(self) -> None:
        self._mu = threading.Lock()
        self._ok_to_read = threading.Condition(self._mu)
        self._ok_to_write = threading.Condition(self._mu)
        self._active_readers = 0
        self._active_writer = False
        self._waiting_writers = 0

    @contextmanager
    def read_lock(self) -> Iterator[None]:
        with self._mu:
            # New readers queue behind active or waiting writers
            while self._active_writer or self._waiting_writers:
                self._ok_to_read.wait()
            self._active_readers += 1
        try:
            yield
        finally:
            with self._mu:
                self._active_readers -= 1
                if self._active_readers == 0:
                    self._ok_to_write.notify()

    @contextmanager
    def write_lock(self) -> Iterator[None]:
        with self._mu:
            self._waiting_writers += 1
            while self._active_writer or self._active_readers:
                self._ok_to_write.wait()
            self._waiting_writers -= 1
            self._active_writer = True
        try:
            yield
        finally:
            with self._mu:
                self._active_writer = False
                if self._waiting_writers:
                    self._ok_to_write.notify()
                else:
                    self._ok_to_read.notify_all()
