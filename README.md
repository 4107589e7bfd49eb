# muxic

muxic is a music player that runs in the terminal. Point it at a folder of MP3
files and it lists them in a library table. You can play tracks, skip back and
forth within them, change the volume, add tracks to a playlist or a queue, and
search the library by title or artist.

## Installation

```
pip install .
```

Sound is decoded and played through pygame's mixer, so pygame must be able to
open MP3 files on your system.

To run the test suite, install the test extra as well:

```
pip install ".[test]"
pytest
```

## Usage

```
muxic [DIRECTORY]
```

`DIRECTORY` is the folder to scan for `.mp3` files (the extension is matched in
any letter case). It defaults to the current directory. Only files directly
inside the folder are listed, in file-name order; subfolders are not scanned.
If the folder does not exist, muxic logs an error and exits with status 1.

Title, artist and album are read from the file's ID3v2 tag, or from an ID3v1
tag when there is no ID3v2 tag. A missing title falls back to the file name and
a missing artist or album shows as `Unknown`. The duration is found by scanning
the MP3 frames.

## Views

Press `tab` to switch views, in the order **Library → Playlists → Queue →
Library**. The status bar at the bottom names the active view. The Playlists
view shows the tracks of the active playlist. Below the table are a progress
bar and the played and total time of the current track.

## Keys

Every key is first offered to the visible table, which moves its cursor for
navigation keys: `up`/`k`, `down`/`j`, `pgup`/`b`, `pgdown`/`f`/`space`,
`ctrl+u`/`u`, `ctrl+d`/`d`, `home`/`g` and `end`/`G`. The key's action, if it
has one, then runs on the row now under the cursor. So `space`, `b` and `d`
move the cursor before they play, skip or remove.

| Key                     | Action                                             |
|-------------------------|----------------------------------------------------|
| `space`, `p`, `enter`   | Play the selected track from its start             |
| `s`                     | Stop playback                                      |
| `b` / `n`               | Skip 10 seconds backward / forward                 |
| `+` / `-`               | Volume up / down (once a track has been played)    |
| `m`                     | Toggle mute                                        |
| `/`                     | Search the library (library view; enter or esc closes) |
| `ctrl+n`                | Create a playlist "New Playlist" and make it active |
| `ctrl+a`                | Add the selected library track to the active playlist |
| `d`                     | Remove the selected track from the active playlist |
| `a`                     | Add the selected library track to the queue        |
| `v`                     | Show the queue                                     |
| `q`, `ctrl+c`           | Quit                                               |

When you add or remove a playlist track and no playlist is active yet, muxic
creates one called "My Playlist". While searching, typed text filters the
library to tracks whose title or artist contains it, ignoring case. Errors from
an action are shown in a red box above the table until the next key press.

## What it does not do

- Playlists and the queue live only in memory; nothing is saved between runs.
- The queue only keeps a position. Reaching the end of a track moves that
  position on, but no track from the queue is played automatically.
- The `[` and `]` keys are bound to previous and next track but do nothing.
- There is no pause key: `space` and `p` restart the selected track.
- Only one playlist is shown at a time, the active one.

## Using it as a library

The parts of the player can also be used on their own:

```python
from muxic.audio import get_audio_files
from muxic.playlist import PlaylistManager

manager = PlaylistManager()
mix = manager.create_playlist("Evening")
manager.add_tracks(mix.id, *get_audio_files("music"))
manager.sort_playlist(mix.id, "artist", True)
for row in manager.to_table_rows(mix.id):
    print(row)
```

Other useful pieces:

- `muxic.audio.read_audio_metadata(path, default_name)` returns
  `(title, artist, album, duration)` for one file.
- `muxic.audio.open_audio_file(path)` decodes a file into an `AudioStream` of
  stereo float samples with `stream`, `seek`, `position` and `close`.
- `muxic.speaker.Speaker` mixes streamers; without a sink, call
  `fill(count)` to pull mixed samples yourself.
- `muxic.search.SearchIndex(rows).search(query)` returns the rows holding every
  word of the query, with their indices.
- `muxic.queue.Queue` is a list of tracks with a wrapping current position.