"""Audio files: tag metadata, MP3 duration scanning and decoding to sample streams."""

from __future__ import annotations

import os
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import NamedTuple

import numpy as np

UNKNOWN = "Unknown"
NO_DURATION = "0:00"
AUDIO_EXTENSION = ".mp3"
DEFAULT_SAMPLE_RATE = 44100


@dataclass
class AudioFile:
    """A single audio file with its metadata."""

    title: str
    artist: str
    album: str
    duration: str
    path: str
    file_name: str

    def to_library_row(self) -> list[str]:
        """Row shown in the library table."""
        return [self.title, self.artist, self.album, self.duration]

    def to_playlist_row(self, index: int) -> list[str]:
        """Row shown in a numbered table; ``index`` is zero-based."""
        return [str(index + 1), self.title, self.artist, self.album, self.duration]


class AudioStream:
    """A seekable stream of stereo float samples in the range [-1, 1]."""

    def __init__(self, samples, sample_rate: int) -> None:
        data = np.asarray(samples, dtype=np.float64)
        if data.ndim == 1:
            data = np.column_stack((data, data))
        if data.ndim != 2 or data.shape[1] != 2:
            raise ValueError("samples must have shape (n, 2) or (n,)")
        self._samples = data
        self.sample_rate = int(sample_rate)
        self._position = 0
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def stream(self, count: int) -> np.ndarray:
        """Return up to ``count`` samples; an empty array means the stream is drained."""
        if self._closed or count <= 0:
            return np.empty((0, 2), dtype=np.float64)
        chunk = self._samples[self._position:self._position + count].copy()
        self._position += len(chunk)
        return chunk

    def position(self) -> int:
        return self._position

    def seek(self, pos: int) -> None:
        if self._closed:
            raise ValueError("stream is closed")
        if not 0 <= pos <= len(self._samples):
            raise ValueError(f"seek position {pos} out of range [0, {len(self._samples)}]")
        self._position = pos

    def close(self) -> None:
        self._closed = True

    def __len__(self) -> int:
        return len(self._samples)

    def __enter__(self) -> AudioStream:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def _normalise(raw: np.ndarray) -> np.ndarray:
    if np.issubdtype(raw.dtype, np.integer):
        info = np.iinfo(raw.dtype)
        if info.min < 0:
            data = raw.astype(np.float64) / -float(info.min)
        else:
            mid = (float(info.max) + 1.0) / 2.0
            data = (raw.astype(np.float64) - mid) / mid
    else:
        data = raw.astype(np.float64)
    if data.ndim == 2 and data.shape[1] > 2:
        data = data[:, :2]
    elif data.ndim == 2 and data.shape[1] == 1:
        data = data[:, 0]
    return data


def open_audio_file(path) -> AudioStream:
    """Decode an audio file into an :class:`AudioStream`.

    Raises ``OSError`` if the file cannot be opened and ``ValueError`` if it
    cannot be decoded.
    """
    with open(path, "rb"):
        pass

    import pygame

    if pygame.mixer.get_init() is None:
        pygame.mixer.init(frequency=DEFAULT_SAMPLE_RATE, size=-16, channels=2)
    try:
        sound = pygame.mixer.Sound(os.fspath(path))
    except pygame.error as exc:
        raise ValueError(f"cannot decode {path}: {exc}") from exc
    raw = pygame.sndarray.array(sound)
    rate = pygame.mixer.get_init()[0]
    return AudioStream(_normalise(raw), rate)


def is_audio_file(name: str) -> bool:
    """True if ``name`` has an ``.mp3`` extension, in any letter case."""
    return name.lower().endswith(AUDIO_EXTENSION)


def format_duration(seconds: float) -> str:
    """Format seconds as ``HH:MM:SS`` when at least an hour long, else ``MM:SS``."""
    total = int(seconds)
    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)
    if hours > 0:
        return f"{hours:02d}:{minutes:02d}:{secs:02d}"
    return f"{minutes:02d}:{secs:02d}"


# --- tag reading -----------------------------------------------------------

def _syncsafe(data: bytes) -> int:
    value = 0
    for byte in data:
        value = (value << 7) | (byte & 0x7F)
    return value


def _decode_text(body: bytes) -> str:
    if not body:
        return ""
    encoding = {0: "latin-1", 1: "utf-16", 2: "utf-16-be", 3: "utf-8"}.get(body[0])
    if encoding is None:
        return ""
    text = body[1:].decode(encoding, errors="replace")
    return text.split("\x00", 1)[0]


_TEXT_FIELDS = {
    "TIT2": "title", "TT2": "title",
    "TPE1": "artist", "TP1": "artist",
    "TALB": "album", "TAL": "album",
}


def _read_id3v2(data: bytes) -> dict[str, str]:
    if len(data) < 10:
        raise ValueError("truncated ID3v2 header")
    major, flags = data[3], data[5]
    if major not in (2, 3, 4):
        raise ValueError(f"unsupported ID3v2 version {major}")
    size = _syncsafe(data[6:10])
    body = data[10:10 + size]
    if flags & 0x80 and major < 4:
        body = body.replace(b"\xff\x00", b"\xff")

    pos = 0
    if flags & 0x40 and major >= 3:
        if major == 3:
            pos = 4 + int.from_bytes(body[0:4], "big")
        else:
            pos = _syncsafe(body[0:4])

    id_len, header_len = (3, 6) if major == 2 else (4, 10)
    fields: dict[str, str] = {}
    while pos + header_len <= len(body):
        frame_id = body[pos:pos + id_len]
        if frame_id[0] == 0:
            break
        if major == 2:
            frame_size = int.from_bytes(body[pos + 3:pos + 6], "big")
            frame_flags = 0
        elif major == 3:
            frame_size = int.from_bytes(body[pos + 4:pos + 8], "big")
            frame_flags = 0
        else:
            frame_size = _syncsafe(body[pos + 4:pos + 8])
            frame_flags = body[pos + 9]
        start = pos + header_len
        content = body[start:start + frame_size]
        pos = start + frame_size
        if frame_flags & 0x01:
            content = content[4:]
        if frame_flags & 0x02:
            content = content.replace(b"\xff\x00", b"\xff")
        name = _TEXT_FIELDS.get(frame_id.decode("latin-1"))
        if name is not None and name not in fields:
            fields[name] = _decode_text(content)
    return fields


def _read_id3v1(data: bytes) -> dict[str, str]:
    if len(data) < 128 or data[-128:-125] != b"TAG":
        raise ValueError("no tags found")
    block = data[-128:]

    def text(raw: bytes) -> str:
        return raw.decode("latin-1").strip("\x00").strip()

    return {"title": text(block[3:33]), "artist": text(block[33:63]), "album": text(block[63:93])}


def _read_tags(data: bytes) -> dict[str, str]:
    try:
        if data[:3] == b"ID3":
            return _read_id3v2(data)
        return _read_id3v1(data)
    except (ValueError, IndexError):
        return {}


# --- MP3 frame scanning ------------------------------------------------------

class _Frame(NamedTuple):
    length: int
    samples: int
    sample_rate: int


_BITRATES_V1 = (0, 32, 40, 48, 56, 64, 80, 96, 112, 128, 160, 192, 224, 256, 320)
_BITRATES_V2 = (0, 8, 16, 24, 32, 40, 48, 56, 64, 80, 96, 112, 128, 144, 160)
_SAMPLE_RATES = {3: (44100, 48000, 32000), 2: (22050, 24000, 16000), 0: (11025, 12000, 8000)}


def _parse_frame_header(header: bytes) -> _Frame | None:
    if header[0] != 0xFF or header[1] & 0xE0 != 0xE0:
        return None
    version = (header[1] >> 3) & 3
    layer = (header[1] >> 1) & 3
    if version == 1 or layer != 1:
        return None
    bitrate_index = header[2] >> 4
    rate_index = (header[2] >> 2) & 3
    if bitrate_index in (0, 15) or rate_index == 3:
        return None
    padding = (header[2] >> 1) & 1
    rate = _SAMPLE_RATES[version][rate_index]
    if version == 3:
        bitrate = _BITRATES_V1[bitrate_index] * 1000
        return _Frame(144 * bitrate // rate + padding, 1152, rate)
    bitrate = _BITRATES_V2[bitrate_index] * 1000
    return _Frame(72 * bitrate // rate + padding, 576, rate)


def _mp3_duration(data: bytes) -> str:
    pos = 0
    if data[:3] == b"ID3" and len(data) >= 10:
        pos = _syncsafe(data[6:10]) + 10
        if data[5] & 0x10:
            pos += 10
    end = len(data)
    if end - 128 >= pos and data[end - 128:end - 125] == b"TAG":
        end -= 128

    samples = 0
    rate = 0
    while pos + 4 <= end:
        frame = _parse_frame_header(data[pos:pos + 4])
        if frame is None or pos + frame.length > end:
            pos += 1
            continue
        if rate == 0:
            rate = frame.sample_rate
        samples += frame.samples
        pos += frame.length
    if rate == 0:
        return NO_DURATION
    return format_duration(samples / rate)


# --- metadata ----------------------------------------------------------------

_metadata_cache: dict[str, tuple[str, str, str, str]] = {}
_cache_lock = threading.Lock()


def read_audio_metadata(path, default_name: str) -> tuple[str, str, str, str]:
    """Return ``(title, artist, album, duration)`` for the file, cached by path."""
    key = os.fspath(path)
    with _cache_lock:
        cached = _metadata_cache.get(key)
    if cached is not None:
        return cached

    try:
        data = Path(key).read_bytes()
    except OSError:
        return default_name, UNKNOWN, UNKNOWN, NO_DURATION

    tags = _read_tags(data)
    result = (
        tags.get("title") or default_name,
        tags.get("artist") or UNKNOWN,
        tags.get("album") or UNKNOWN,
        _mp3_duration(data),
    )
    with _cache_lock:
        _metadata_cache[key] = result
    return result


def get_audio_files(directory) -> list[AudioFile]:
    """Scan ``directory`` (not recursively) for audio files, in file-name order."""
    base = os.fspath(directory)
    with os.scandir(base) as entries:
        names = sorted(
            entry.name
            for entry in entries
            if not entry.is_dir(follow_symlinks=False) and is_audio_file(entry.name)
        )

    def load(name: str) -> AudioFile:
        path = os.path.normpath(os.path.join(base, name))
        title, artist, album, duration = read_audio_metadata(path, name)
        return AudioFile(title, artist, album, duration, path, name)

    with ThreadPoolExecutor() as pool:
        return list(pool.map(load, names))