"""
M8 song file reader.

Reads .m8s files from disk and decodes them to the Song model.
"""

from pathlib import Path
from typing import Union

from m8midi.formats.m8.decoder import M8Offsets, SongDecoder
from m8midi.models.song import Song


class M8SongReader:
    """
    Reader for M8 song files.

    Example:
        song = M8SongReader.read("SONG.m8s")
        print(f"Song: {song.name}, Tempo: {song.tempo}")
    """

    def __init__(self):
        self._raw_data: bytes = b""

    @classmethod
    def read(cls, filepath: Union[str, Path]) -> Song:
        """
        Read an .m8s file and return a Song.

        Args:
            filepath: Path to .m8s file

        Returns:
            Decoded Song
        """
        reader = cls()
        return reader.parse_file(filepath)

    def parse_file(self, filepath: Union[str, Path]) -> Song:
        """
        Parse an .m8s file.

        Args:
            filepath: Path to .m8s file

        Returns:
            Decoded Song

        Raises:
            FileNotFoundError: If the file does not exist
            DecodeError: If the file is not a valid song
        """
        filepath = Path(filepath)

        if not filepath.exists():
            raise FileNotFoundError(f"File not found: {filepath}")

        with open(filepath, "rb") as f:
            self._raw_data = f.read()

        return self.parse_bytes(self._raw_data)

    def parse_bytes(self, data: bytes) -> Song:
        """
        Parse song data from bytes.

        Args:
            data: Raw .m8s file contents

        Returns:
            Decoded Song
        """
        self._raw_data = data
        return SongDecoder(data).decode()

    @classmethod
    def can_read(cls, filepath: Union[str, Path]) -> bool:
        """
        Check if a file looks like an M8 song.

        Args:
            filepath: Path to check

        Returns:
            True if the file has the version signature and minimum size
        """
        filepath = Path(filepath)

        if not filepath.is_file():
            return False

        if filepath.stat().st_size < M8Offsets.MIN_SIZE_PRIOR_TO_2_5:
            return False

        with open(filepath, "rb") as f:
            signature = f.read(len(M8Offsets.VERSION_SIGNATURE))

        return signature == M8Offsets.VERSION_SIGNATURE

    @classmethod
    def get_file_info(cls, filepath: Union[str, Path]) -> dict:
        """
        Get basic information about an .m8s file without full decoding.

        Args:
            filepath: Path to .m8s file

        Returns:
            Dictionary with file info
        """
        filepath = Path(filepath)

        with open(filepath, "rb") as f:
            data = f.read()

        info = {
            "valid": False,
            "size": len(data),
            "min_size": M8Offsets.MIN_SIZE_PRIOR_TO_2_5,
        }

        if len(data) >= M8Offsets.VERSION_SIZE:
            info["signature"] = data[:9].decode("ascii", errors="replace")
            lsb, msb = data[10], data[11]
            info["version"] = f"{msb & 0x0F}.{(lsb >> 4) & 0x0F}.{lsb & 0x0F}"
            info["valid"] = (
                data[:9] == M8Offsets.VERSION_SIGNATURE
                and len(data) >= M8Offsets.MIN_SIZE_PRIOR_TO_2_5
            )

        return info
