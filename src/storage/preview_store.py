# src/storage/preview_store.py

"""Scoped temporary previews of photos picked but not yet uploaded."""

import logging
import shutil
import tempfile
import uuid
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger("vendor_market.previews")


@dataclass
class PhotoPreview:
    """A temporary copy of a picked photo, valid until released."""

    path: Path
    source: Path
    released: bool = False


class PreviewStore:
    """Creates preview copies and deletes them when released.

    Every preview handed out must come back through :meth:`release`
    (or :meth:`release_all`); :attr:`active_count` stays bounded by the
    photos currently on screen.
    """

    def __init__(self, root: Path | None = None) -> None:
        self._root = root
        self._owns_root = root is None
        self._active: dict[Path, PhotoPreview] = {}

    @property
    def active_count(self) -> int:
        return len(self._active)

    def _ensure_root(self) -> Path:
        if self._root is None:
            self._root = Path(tempfile.mkdtemp(prefix="vendor_market_"))
        self._root.mkdir(parents=True, exist_ok=True)
        return self._root

    def create(self, source: Path) -> PhotoPreview:
        """Copy *source* into the preview area."""
        target = self._ensure_root() / f"{uuid.uuid4().hex}{source.suffix}"
        shutil.copyfile(source, target)
        preview = PhotoPreview(path=target, source=source)
        self._active[target] = preview
        logger.debug("Preview %s created for %s", target.name, source)
        return preview

    def release(self, preview: PhotoPreview) -> None:
        """Delete the preview copy; releasing twice is a no-op."""
        if preview.released:
            return
        preview.released = True
        self._active.pop(preview.path, None)
        preview.path.unlink(missing_ok=True)
        logger.debug("Preview %s released", preview.path.name)

    def release_all(self) -> int:
        """Release every outstanding preview; returns how many.

        A temporary directory the store created itself is removed too.
        """
        previews = list(self._active.values())
        for preview in previews:
            self.release(preview)
        if self._owns_root and self._root is not None:
            shutil.rmtree(self._root, ignore_errors=True)
            logger.debug("Preview directory %s removed", self._root)
            self._root = None
        return len(previews)
