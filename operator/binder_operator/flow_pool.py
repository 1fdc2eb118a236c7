"""
Bounded pool for bind/unbind flows.

A fixed set of daemon threads drains a queue of flows. submit() never
blocks the caller: when the queue is full the flow is dropped and counted.
"""

import logging
import queue
import threading
from typing import Any, Callable, List

from .metrics import set_queue_depth, track_dropped_flow

logger = logging.getLogger(__name__)

_STOP = object()


class FlowPool:
    def __init__(self, workers: int, queue_size: int = 0, name: str = "BinderFlow"):
        self.workers = workers
        self.name = name
        self._queue: "queue.Queue" = queue.Queue(maxsize=queue_size)
        self._threads: List[threading.Thread] = []
        self._accepting = False
        self._lock = threading.Lock()

    def start(self) -> None:
        with self._lock:
            if self._threads:
                return
            for i in range(self.workers):
                thread = threading.Thread(target=self._run, daemon=True, name=f"{self.name}-{i}")
                thread.start()
                self._threads.append(thread)
            self._accepting = True
        logger.info(f"Flow pool started with {self.workers} workers")

    def submit(self, fn: Callable[..., Any], *args: Any) -> bool:
        """
        Queue fn(*args) for a worker.

        Returns:
            False if the pool is stopped or the queue is full
        """
        if not self._accepting:
            logger.warning(f"Flow pool not accepting work, dropping {getattr(fn, '__name__', fn)}")
            track_dropped_flow()
            return False
        try:
            self._queue.put_nowait((fn, args))
        except queue.Full:
            logger.error(f"Flow queue full ({self._queue.maxsize}), dropping {getattr(fn, '__name__', fn)}")
            track_dropped_flow()
            return False
        set_queue_depth(self._queue.qsize())
        return True

    def depth(self) -> int:
        return self._queue.qsize()

    def stop(self, wait: bool = False, timeout: float = None) -> None:
        """
        Stop accepting flows.

        Flows already queued or running still complete. With wait=True,
        block until the workers have drained the queue and exited; without
        it, workers keep draining and die with the process.
        """
        with self._lock:
            if not self._accepting:
                return
            self._accepting = False
            threads = list(self._threads)
        logger.info("Flow pool stopped accepting flows", extra={"queued": self._queue.qsize()})
        if not wait:
            return
        for _ in threads:
            self._queue.put(_STOP)
        for thread in threads:
            thread.join(timeout)

    def _run(self) -> None:
        while True:
            item = self._queue.get()
            try:
                if item is _STOP:
                    return
                fn, args = item
                set_queue_depth(self._queue.qsize())
                try:
                    fn(*args)
                except Exception:
                    logger.exception(f"Flow {getattr(fn, '__name__', fn)} crashed")
            finally:
                self._queue.task_done()
