# app/core/single_flight.py
"""
Single-flight: chamadas concorrentes para a mesma chave esperam a primeira
em vez de repetirem o trabalho (ex.: duas criações da mesma pasta).
Chaves diferentes rodam em paralelo.
"""
from __future__ import annotations

import threading
from concurrent.futures import Future
from typing import Callable, Generic, Hashable, TypeVar

K = TypeVar("K", bound=Hashable)
T = TypeVar("T")


class SingleFlight(Generic[K, T]):
    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._inflight: dict[K, Future[T]] = {}

    def do(self, key: K, fn: Callable[[], T]) -> T:
        with self._lock:
            fut = self._inflight.get(key)
            leader = fut is None
            if leader:
                fut = Future()
                self._inflight[key] = fut

        if not leader:
            # erro do líder é repassado para todos que esperavam
            return fut.result()

        try:
            result = fn()
        except BaseException as e:
            fut.set_exception(e)
            raise
        else:
            fut.set_result(result)
            return result
        finally:
            with self._lock:
                self._inflight.pop(key, None)

    def in_flight(self, key: K) -> bool:
        with self._lock:
            return key in self._inflight
