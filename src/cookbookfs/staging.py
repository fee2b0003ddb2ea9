"""Ephemeral staging directories.

A staging area is a fresh ``mkdtemp`` directory holding references
(symlinks, or copies where symlinks are unavailable) that present an
existing tree under another name. Every area is removed when its
``staging_area()`` block exits, whatever the exit path.
"""

from cookbookfs.errors import StagingIOError
from cookbookfs.interfaces import IStagingFilesystem
from zope.interface import implementer

import contextlib
import logging
import os
import shutil
import sys
import tempfile


logger = logging.getLogger(__name__)


class StagingArea:
    def __init__(self, path):
        self.path = path
        self.references = []

    def __repr__(self):
        return f"<StagingArea {self.path}>"


class _BaseStagingFilesystem:
    def __init__(self, temp_dir=None):
        self.temp_dir = temp_dir

    @contextlib.contextmanager
    def staging_area(self, prefix="cookbookfs-"):
        try:
            path = tempfile.mkdtemp(prefix=prefix, dir=self.temp_dir)
        except OSError as e:
            raise StagingIOError(f"cannot create staging directory: {e}") from e
        area = StagingArea(path)
        logger.debug("Created staging area %s", path)
        try:
            yield area
        except BaseException:
            try:
                self.release(area)
            except StagingIOError:
                logger.warning(
                    "Failed to release staging area %s", path, exc_info=True
                )
            raise
        self.release(area)

    def make_reference(self, area, target_path, name):
        link_path = os.path.join(area.path, name)
        try:
            self._reference(target_path, link_path)
        except OSError as e:
            raise StagingIOError(
                f"cannot stage {target_path} as {link_path}: {e}"
            ) from e
        area.references.append(link_path)
        return link_path

    def release(self, area):
        try:
            self._release(area)
        except OSError as e:
            raise StagingIOError(
                f"cannot remove staging area {area.path}: {e}"
            ) from e
        logger.debug("Removed staging area %s", area.path)

    def _reference(self, target_path, link_path):
        raise NotImplementedError

    def _release(self, area):
        raise NotImplementedError


@implementer(IStagingFilesystem)
class SymlinkStagingFilesystem(_BaseStagingFilesystem):
    """Stage trees through symbolic links."""

    def removal_follows_references(self):
        return sys.platform == "win32"

    def _reference(self, target_path, link_path):
        os.symlink(target_path, link_path, target_is_directory=True)

    def _release(self, area):
        if not os.path.lexists(area.path):
            return
        if self.removal_follows_references():
            # References go first so the recursive delete never reaches
            # their targets.
            for link_path in area.references:
                if os.path.lexists(link_path):
                    _remove_link(link_path)
            area.references = []
            os.rmdir(area.path)
        else:
            shutil.rmtree(area.path)


@implementer(IStagingFilesystem)
class CopyingStagingFilesystem(_BaseStagingFilesystem):
    """Stage trees by copying them, for hosts without usable symlinks."""

    def removal_follows_references(self):
        return False

    def _reference(self, target_path, link_path):
        shutil.copytree(target_path, link_path, symlinks=True)

    def _release(self, area):
        if os.path.lexists(area.path):
            shutil.rmtree(area.path)


def _remove_link(link_path):
    # Windows directory symlinks and junctions are removed with rmdir.
    if os.path.isdir(link_path) and sys.platform == "win32":
        os.rmdir(link_path)
    else:
        os.unlink(link_path)
