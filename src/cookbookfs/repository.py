"""On-disk chef repository with versioned cookbook directories.

``<repo>/cookbooks`` holds one directory per cookbook version, named
``{cookbook}-{version}`` exactly like the server side lists them.
"""

from cookbookfs import names
from cookbookfs.chefignore import Chefignore
from cookbookfs.entry import BaseDirectory
from cookbookfs.entry import NonexistentEntry
from cookbookfs.errors import NotFoundError
from cookbookfs.interfaces import IFileEntry
from zope.interface import implementer

import os


class RepositoryRootDir(BaseDirectory):
    def __init__(self, file_path):
        super().__init__("", None)
        self.file_path = os.path.abspath(file_path)

    @property
    def path_for_printing(self):
        return self.file_path

    def _identity(self):
        return (type(self), self.file_path)

    def _list_children(self):
        if os.path.isdir(os.path.join(self.file_path, "cookbooks")):
            return [RepositoryCookbooksDir("cookbooks", self)]
        return []

    def _make_detached(self, name):
        if name == "cookbooks":
            return RepositoryCookbooksDir(name, self)
        return NonexistentEntry(name, self)

    def can_have_child(self, name, is_dir):
        return bool(is_dir) and name == "cookbooks"


class _DiskEntryMixin:
    @property
    def path_for_printing(self):
        return self.file_path

    def exists(self):
        return os.path.lexists(self.file_path)


class RepositoryCookbooksDir(_DiskEntryMixin, BaseDirectory):
    def __init__(self, name, parent):
        super().__init__(name, parent)
        self.file_path = os.path.join(parent.file_path, name)
        self._chefignore = None

    @property
    def chefignore(self):
        if self._chefignore is None:
            self._chefignore = Chefignore(self.file_path)
        return self._chefignore

    def _list_children(self):
        if not os.path.isdir(self.file_path):
            return []
        return [
            RepositoryCookbookDir(entry.name, self)
            for entry in sorted(os.scandir(self.file_path), key=lambda e: e.name)
            if entry.is_dir() and names.matches(entry.name)
        ]

    def _make_detached(self, name):
        return RepositoryCookbookDir(name, self)

    def can_have_child(self, name, is_dir):
        return bool(is_dir) and names.matches(name)


class RepositoryCookbookDir(_DiskEntryMixin, BaseDirectory):
    """A ``{cookbook}-{version}`` directory."""

    def __init__(self, name, parent):
        super().__init__(name, parent)
        self.file_path = os.path.join(parent.file_path, name)

    @property
    def chefignore(self):
        return self.parent.chefignore

    def _list_children(self):
        return _list_disk_children(self, self)

    def _make_detached(self, name):
        return RepositoryPath(name, self, self)


@implementer(IFileEntry)
class RepositoryPath(_DiskEntryMixin, BaseDirectory):
    """A file or directory inside a cookbook.

    Which of the two it is gets decided on disk when asked, so detached
    entries can be made without touching the filesystem.
    """

    def __init__(self, name, parent, cookbook):
        super().__init__(name, parent)
        self.file_path = os.path.join(parent.file_path, name)
        self.cookbook = cookbook

    def is_dir(self):
        return os.path.isdir(self.file_path)

    def _list_children(self):
        return _list_disk_children(self, self.cookbook)

    def _make_detached(self, name):
        return RepositoryPath(name, self, self.cookbook)

    def can_have_child(self, name, is_dir):
        return True

    def read(self):
        try:
            with open(self.file_path, "rb") as f:
                return f.read()
        except (FileNotFoundError, IsADirectoryError) as e:
            raise NotFoundError(self) from e


def _list_disk_children(directory, cookbook):
    if not os.path.isdir(directory.file_path):
        return []
    chefignore = cookbook.chefignore
    result = []
    for entry in sorted(os.scandir(directory.file_path), key=lambda e: e.name):
        relative = os.path.relpath(entry.path, cookbook.file_path)
        if chefignore.ignored(relative):
            continue
        result.append(RepositoryPath(entry.name, directory, cookbook))
    return result
