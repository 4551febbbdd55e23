"""
Locked writes of output artifacts.

Overlay software keeps reading the output files while they are rewritten, so
every write takes a lock on the destination, truncates it and writes the
whole payload before releasing it. I/O failures are logged and reported as
False; they never escape the writer.

Windows uses msvcrt.locking (mandatory); POSIX uses fcntl locks (advisory).
"""

from __future__ import annotations

import enum
import io
import logging
import os
from pathlib import Path
from typing import Any, BinaryIO, Tuple

from PIL import Image

log = logging.getLogger(__name__)

BLANK_COVER_SIZE: Tuple[int, int] = (256, 256)

# msvcrt.locking works on byte ranges. Exclusive writes lock everything up
# to _WIN_LOCK_RANGE; shared-read writes lock one byte past it so readers
# are never refused.
_WIN_LOCK_RANGE = 0x7FFFFFFF


class ShareMode(enum.Enum):
    READ = "read"  # readers may open the file while it is written
    NONE = "none"  # fully exclusive


def blank_cover() -> Image.Image:
    return Image.new("RGB", BLANK_COVER_SIZE, (0, 0, 0))


def encode_jpeg(image: Any) -> bytes:
    """
    Encode album art as JPEG.

    Accepts a PIL image or encoded image bytes in any format Pillow reads.
    None yields the blank placeholder cover.
    """
    if image is None:
        image = blank_cover()
    elif isinstance(image, (bytes, bytearray)):
        image = Image.open(io.BytesIO(bytes(image)))

    buf = io.BytesIO()
    image.convert("RGB").save(buf, format="JPEG")
    return buf.getvalue()


class LockedWriter:
    def ensure_exists(self, path: Path) -> bool:
        """Create the parent directory and an empty file if missing."""
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            if not path.exists():
                path.write_bytes(b"")
            return True
        except OSError as e:
            log.error("Unable to create file %s: %s", path, e)
            return False

    def write_text(self, path: Path, text: str) -> bool:
        return self.write_bytes(path, text.encode("utf-8"), share=ShareMode.READ)

    def write_image(self, path: Path, image: Any = None) -> bool:
        """Write album art as JPEG, or the blank cover when there is none."""
        try:
            data = encode_jpeg(image)
        except OSError as e:
            # Undecodable art still leaves a readable cover behind
            log.warning("Unable to encode album art for %s, writing blank cover: %s", path, e)
            data = encode_jpeg(None)
        return self.write_bytes(path, data, share=ShareMode.NONE)

    def write_bytes(self, path: Path, data: bytes, share: ShareMode = ShareMode.READ) -> bool:
        if not self.ensure_exists(path):
            return False

        try:
            # r+b so the file is not truncated before the lock is held
            with open(path, "r+b") as fh:
                _lock(fh, share)
                try:
                    fh.seek(0)
                    fh.truncate()
                    fh.write(data)
                    fh.flush()
                finally:
                    _unlock(fh, share)
        except OSError as e:
            log.error("Unable to write to file %s: %s", path, e)
            return False

        log.debug("Wrote %d bytes to %s", len(data), path)
        return True


if os.name == "nt":
    import msvcrt

    def _lock_region(share: ShareMode) -> Tuple[int, int]:
        if share is ShareMode.NONE:
            return 0, _WIN_LOCK_RANGE
        return _WIN_LOCK_RANGE, 1

    def _lock(fh: BinaryIO, share: ShareMode) -> None:
        offset, length = _lock_region(share)
        fh.seek(offset)
        msvcrt.locking(fh.fileno(), msvcrt.LK_NBLCK, length)
        fh.seek(0)

    def _unlock(fh: BinaryIO, share: ShareMode) -> None:
        offset, length = _lock_region(share)
        fh.seek(offset)
        msvcrt.locking(fh.fileno(), msvcrt.LK_UNLCK, length)

else:
    import fcntl

    # Record locks (lockf) only conflict with other writers; exclusive
    # writes also take a whole-file flock so locking readers are refused.
    def _lock(fh: BinaryIO, share: ShareMode) -> None:
        fcntl.lockf(fh.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
        if share is ShareMode.NONE:
            try:
                fcntl.flock(fh.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
            except OSError:
                fcntl.lockf(fh.fileno(), fcntl.LOCK_UN)
                raise

    def _unlock(fh: BinaryIO, share: ShareMode) -> None:
        if share is ShareMode.NONE:
            fcntl.flock(fh.fileno(), fcntl.LOCK_UN)
        fh.seek(0)
        fcntl.lockf(fh.fileno(), fcntl.LOCK_UN)
