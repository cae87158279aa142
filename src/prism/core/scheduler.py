"""Tile partitioning and the worker thread pool that renders tiles.

The image is cut into square tiles. A fixed pool of worker threads pulls
tiles from a shared FIFO queue until it is empty. Each tile writes only its
own pixels, so the shared pixel buffer needs no locking; only the queue and
the completion counter are synchronized.

The orchestrating thread waits on a condition variable that workers notify
after every completed tile, and runs the caller's progress callback once per
completed tile in between. A worker exception is logged, stops further tile
dispatch, and is re-raised from wait() as TileRenderError after every
worker has exited.

Example:
    >>> from src.prism.core.scheduler import TileScheduler, partition_tiles
    >>> tiles = partition_tiles(width=64, height=48, tile_size=16)
    >>> len(tiles)
    12
    >>> TileScheduler(num_threads=4).run(tiles, lambda tile: None)
"""

from __future__ import annotations

import logging
import os
import queue
import threading
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

from src.prism.core.config import RenderCancelledError, TileRenderError

logger = logging.getLogger(__name__)

T = TypeVar("T")

ProgressCallback = Callable[[int, int], None]


@dataclass(frozen=True)
class Tile:
    """A rectangular block of pixels, half-open on both axes.

    Attributes:
        index: Position of the tile in row-major dispatch order.
        x0: First column.
        y0: First row.
        x1: One past the last column.
        y1: One past the last row.
    """

    index: int
    x0: int
    y0: int
    x1: int
    y1: int

    @property
    def width(self) -> int:
        return self.x1 - self.x0

    @property
    def height(self) -> int:
        return self.y1 - self.y0

    def pixels(self) -> Iterator[tuple[int, int]]:
        """Yield (x, y) for every pixel in the tile, row by row."""
        for y in range(self.y0, self.y1):
            for x in range(self.x0, self.x1):
                yield x, y


def partition_tiles(width: int, height: int, tile_size: int) -> list[Tile]:
    """Cut a width x height image into square tiles.

    Tiles in the last row and column are clipped to the image bounds.

    Raises:
        ValueError: If any dimension is not positive.
    """
    if width < 1 or height < 1 or tile_size < 1:
        raise ValueError(
            f"Image and tile sizes must be positive, got {width}x{height} / {tile_size}"
        )
    tiles = []
    for y0 in range(0, height, tile_size):
        for x0 in range(0, width, tile_size):
            tiles.append(
                Tile(
                    index=len(tiles),
                    x0=x0,
                    y0=y0,
                    x1=min(x0 + tile_size, width),
                    y1=min(y0 + tile_size, height),
                )
            )
    return tiles


class TileScheduler(Generic[T]):
    """A fixed-size pool of worker threads draining a task queue.

    One scheduler runs one batch of tasks at a time: start() launches the
    workers, wait() blocks until they have all exited, and run() does both.

    Attributes:
        num_threads: Upper bound on the number of worker threads.
    """

    def __init__(self, num_threads: int | None = None) -> None:
        if num_threads is not None and num_threads < 1:
            raise ValueError(f"num_threads must be positive, got {num_threads}")
        self.num_threads = num_threads if num_threads is not None else (os.cpu_count() or 1)
        self._lock = threading.Lock()
        self._changed = threading.Condition(self._lock)
        self._stop = threading.Event()
        self._cancelled = False
        self._completed = 0
        self._total = 0
        self._active = 0
        self._failures: list[tuple[int, BaseException]] = []
        self._workers: list[threading.Thread] = []

    @property
    def completed(self) -> int:
        """Number of tasks finished in the current batch."""
        with self._lock:
            return self._completed

    @property
    def total(self) -> int:
        """Number of tasks in the current batch."""
        with self._lock:
            return self._total

    def cancel(self) -> None:
        """Ask workers to stop taking new tasks; running tasks finish."""
        with self._lock:
            self._cancelled = True
        self._stop.set()

    def start(self, tasks: Sequence[T], work: Callable[[T], None]) -> None:
        """Enqueue every task and launch the worker threads.

        Raises:
            RuntimeError: If a previous batch is still running.
        """
        if any(worker.is_alive() for worker in self._workers):
            raise RuntimeError("TileScheduler is already running a batch")

        task_queue: queue.Queue[tuple[int, T]] = queue.Queue()
        for index, task in enumerate(tasks):
            task_queue.put((index, task))

        thread_count = min(self.num_threads, len(tasks))
        with self._lock:
            self._completed = 0
            self._total = len(tasks)
            self._active = thread_count
            self._failures = []
            self._cancelled = False
        self._stop.clear()

        self._workers = [
            threading.Thread(
                target=self._worker_loop,
                args=(task_queue, work),
                name=f"prism-worker-{k}",
                daemon=True,
            )
            for k in range(thread_count)
        ]
        for worker in self._workers:
            worker.start()

    def wait(self, progress: ProgressCallback | None = None) -> None:
        """Block until every worker has exited.

        Args:
            progress: Called on this thread as progress(completed, total)
                once per completed task, with completed increasing by one
                each call.

        Raises:
            TileRenderError: If any task raised.
            RenderCancelledError: If cancel() stopped the batch early.
        """
        reported = 0
        try:
            while True:
                with self._changed:
                    while self._completed == reported and self._active > 0:
                        self._changed.wait()
                    completed = self._completed
                    active = self._active
                    total = self._total
                if progress is not None:
                    for count in range(reported + 1, completed + 1):
                        progress(count, total)
                reported = completed
                if active == 0:
                    break
        except BaseException:
            self._stop.set()
            raise
        finally:
            for worker in self._workers:
                worker.join()

        with self._lock:
            failures = list(self._failures)
            cancelled = self._cancelled
            completed = self._completed
            total = self._total
        if failures:
            raise TileRenderError(failures) from failures[0][1]
        if cancelled and completed < total:
            raise RenderCancelledError(f"Render cancelled after {completed} of {total} tiles")

    def run(
        self,
        tasks: Sequence[T],
        work: Callable[[T], None],
        progress: ProgressCallback | None = None,
    ) -> None:
        """Run every task on the pool and wait for completion."""
        self.start(tasks, work)
        self.wait(progress)

    def _worker_loop(self, task_queue: queue.Queue[tuple[int, T]], work: Callable[[T], None]) -> None:
        try:
            while not self._stop.is_set():
                try:
                    index, task = task_queue.get_nowait()
                except queue.Empty:
                    break
                try:
                    work(task)
                except Exception as e:
                    logger.exception("Tile task %d failed", index)
                    with self._lock:
                        self._failures.append((index, e))
                    self._stop.set()
                    continue
                with self._changed:
                    self._completed += 1
                    self._changed.notify_all()
        finally:
            with self._changed:
                self._active -= 1
                self._changed.notify_all()
