"""Playback state with pause and volume controls over sample streams."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import numpy as np

from muxic.audio import AudioStream
from muxic.types import InvalidStateError


def _empty() -> np.ndarray:
    return np.empty((0, 2), dtype=np.float64)


@dataclass
class Ctrl:
    """Passes samples through, or silence while paused."""

    streamer: Any = None
    paused: bool = False

    def stream(self, count: int) -> np.ndarray:
        if self.streamer is None or count <= 0:
            return _empty()
        if self.paused:
            return np.zeros((count, 2), dtype=np.float64)
        return np.asarray(self.streamer.stream(count), dtype=np.float64)


@dataclass
class Volume:
    """Scales samples by ``base ** volume``, or silences them."""

    streamer: Any = None
    base: float = 2.0
    volume: float = 0.0
    silent: bool = False

    def stream(self, count: int) -> np.ndarray:
        if self.streamer is None or count <= 0:
            return _empty()
        chunk = np.asarray(self.streamer.stream(count), dtype=np.float64)
        if self.silent:
            return np.zeros_like(chunk)
        return chunk * (self.base ** self.volume)


@dataclass
class AudioPlayer:
    """State of the audio player; times are in seconds."""

    current_streamer: AudioStream | None = None
    playing: bool = False
    samples_played: int = 0
    total_samples: int = 0
    sample_rate: int = 0
    played_time: float = 0.0
    total_time: float = 0.0
    ctrl: Ctrl | None = None
    volume: Volume | None = None

    def play(self) -> None:
        if self.ctrl is not None:
            self.ctrl.paused = False
            self.playing = True

    def pause(self) -> None:
        if self.ctrl is not None:
            self.ctrl.paused = True
            self.playing = False

    def stop(self) -> None:
        if self.current_streamer is not None:
            self.current_streamer.close()
            self.current_streamer = None
        self.playing = False
        self.samples_played = 0
        self.total_samples = 0
        self.played_time = 0.0

    def set_volume(self, volume: float) -> None:
        if self.volume is not None:
            self.volume.volume = volume

    def seek_to(self, seconds: float) -> None:
        """Move playback to ``seconds`` into the current track."""
        if self.current_streamer is None:
            raise InvalidStateError("no track is playing")
        sample_pos = int(seconds * self.sample_rate)
        self.current_streamer.seek(sample_pos)
        self.samples_played = sample_pos
        self.played_time = seconds

    def progress(self) -> float:
        """Fraction of the track played, 0 when nothing is loaded."""
        if self.total_samples <= 0:
            return 0.0
        return self.samples_played / self.total_samples

    def is_playing(self) -> bool:
        return self.playing and self.ctrl is not None and not self.ctrl.paused