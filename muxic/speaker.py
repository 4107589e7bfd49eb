"""A software mixer that pulls samples from streamers and feeds an output."""

from __future__ import annotations

import threading
import time
from typing import Any, Callable

import numpy as np

_OUTPUT_POLL = 0.005


class _PygameSink:
    """Plays mixed chunks through the pygame mixer, blocking to keep pace."""

    def __init__(self, sample_rate: int, buffer_size: int) -> None:
        import pygame

        self._pygame = pygame
        if pygame.mixer.get_init() is None:
            pygame.mixer.init(frequency=sample_rate, size=-16, channels=2)
        self._channel = pygame.mixer.Channel(0)

    def __call__(self, chunk: np.ndarray) -> None:
        pcm = np.ascontiguousarray((np.clip(chunk, -1.0, 1.0) * 32767).astype(np.int16))
        sound = self._pygame.sndarray.make_sound(pcm)
        while self._channel.get_queue() is not None:
            time.sleep(_OUTPUT_POLL)
        if self._channel.get_busy():
            self._channel.queue(sound)
        else:
            self._channel.play(sound)

    def close(self) -> None:
        self._channel.stop()


class Speaker:
    """Mixes playing streamers and hands the result to a sink.

    A streamer is anything with ``stream(count)`` returning an ``(n, 2)``
    array; returning fewer than ``count`` samples means it is exhausted and
    it is dropped. With a ``sink`` (a blocking callable taking each mixed
    chunk), or with ``device=True`` for the sound card, a background thread
    keeps the output fed; otherwise chunks are pulled with :meth:`fill`.
    """

    def __init__(self, sample_rate: int = 44100, buffer_size: int | None = None, *,
                 sink: Callable[[np.ndarray], Any] | None = None, device: bool = False) -> None:
        if sample_rate <= 0:
            raise ValueError("sample rate must be positive")
        self.sample_rate = int(sample_rate)
        self.buffer_size = int(buffer_size) if buffer_size is not None else max(self.sample_rate // 10, 1)
        if self.buffer_size <= 0:
            raise ValueError("buffer size must be positive")
        if sink is not None and device:
            raise ValueError("give either a sink or device=True, not both")
        if device:
            sink = _PygameSink(self.sample_rate, self.buffer_size)

        self._lock = threading.RLock()
        self._streamers: list[Any] = []
        self._closed = False
        self._stop = threading.Event()
        self._sink = sink
        self._thread: threading.Thread | None = None
        if sink is not None:
            self._thread = threading.Thread(target=self._run, name="speaker", daemon=True)
            self._thread.start()

    def _run(self) -> None:
        while not self._stop.is_set():
            chunk = self.fill(self.buffer_size)
            self._sink(chunk)

    def play(self, streamer) -> None:
        """Start mixing ``streamer`` into the output."""
        with self._lock:
            if self._closed:
                raise RuntimeError("speaker is closed")
            self._streamers.append(streamer)

    def clear(self) -> None:
        """Drop every playing streamer."""
        with self._lock:
            self._streamers = []

    def lock(self):
        """The re-entrant lock that guards the streamers; use it as a context manager."""
        return self._lock

    def fill(self, count: int) -> np.ndarray:
        """Mix the next ``count`` samples of every playing streamer."""
        if count <= 0:
            return np.empty((0, 2), dtype=np.float64)
        mix = np.zeros((count, 2), dtype=np.float64)
        with self._lock:
            drained = []
            for streamer in list(self._streamers):
                chunk = np.asarray(streamer.stream(count), dtype=np.float64)[:count]
                if len(chunk):
                    mix[:len(chunk)] += chunk
                if len(chunk) < count:
                    drained.append(streamer)
            if drained:
                self._streamers = [
                    s for s in self._streamers if all(s is not d for d in drained)
                ]
        return mix

    def close(self) -> None:
        """Stop the output thread and drop all streamers."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._streamers = []
        self._stop.set()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join()
        close_sink = getattr(self._sink, "close", None)
        if callable(close_sink):
            close_sink()

    def __enter__(self) -> Speaker:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()