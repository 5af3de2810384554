"""Test configuration and fixtures."""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent))

from song_builder import SongBuilder, one_note_song


@pytest.fixture
def blank_song_data():
    """Return bytes of an empty version 3.0.0 song."""
    return SongBuilder().build()


@pytest.fixture
def one_note_data():
    """Return bytes of a song whose track 1 plays a single C-1."""
    return one_note_song().build()


@pytest.fixture
def song_file(tmp_path, one_note_data):
    """Return path to a one-note .m8s file on disk."""
    path = tmp_path / "SONG.m8s"
    path.write_bytes(one_note_data)
    return path
