"""Base classes shared by every cookbook tree backend.

Entries hold a plain reference to their parent, used only to derive
``path`` and ``root``. Ownership flows from the root down through the
children caches.
"""

from cookbookfs.errors import NotFoundError
from cookbookfs.interfaces import IDirectoryEntry
from cookbookfs.interfaces import IEntry
from zope.interface import implementer


@implementer(IEntry)
class BaseEntry:

    def __init__(self, name, parent=None):
        self.name = name
        self.parent = parent
        if parent is None:
            self.path = "/"
        elif parent.parent is None:
            self.path = f"/{name}"
        else:
            self.path = f"{parent.path}/{name}"

    @property
    def path_for_printing(self):
        return self.path

    @property
    def root(self):
        entry = self
        while entry.parent is not None:
            entry = entry.parent
        return entry

    def is_dir(self):
        return False

    def exists(self):
        if self.parent is None:
            return True
        return any(child.name == self.name for child in self.parent.children())

    def _identity(self):
        return (type(self), self.name, self.parent)

    def __eq__(self, other):
        if not isinstance(other, BaseEntry):
            return NotImplemented
        return self._identity() == other._identity()

    def __hash__(self):
        return hash((type(self), self.path))

    def __repr__(self):
        return f"<{self.__class__.__name__} {self.path_for_printing}>"


@implementer(IDirectoryEntry)
class BaseDirectory(BaseEntry):
    """Directory entry with a lazily populated, per-instance children cache.

    The first ``children()`` call lists the backend through
    ``_list_children()``; every later call returns the same list. Discard
    the instance to list again. Instances are single-owner: nothing guards
    the cache against concurrent population.
    """

    def __init__(self, name, parent=None):
        super().__init__(name, parent)
        self._children = None

    def is_dir(self):
        return True

    def children(self):
        if self._children is None:
            self._children = self._list_children()
        return self._children

    def make_child_entry(self, name):
        if self._children is not None:
            for child in self._children:
                if child.name == name:
                    return child
        return self._make_detached(name)

    def child(self, name):
        return self.make_child_entry(name)

    def can_have_child(self, name, is_dir):
        return True

    def _list_children(self):
        raise NotImplementedError

    def _make_detached(self, name):
        raise NotImplementedError


def resolve_path(root, path):
    """Return the entry at ``path`` below ``root`` without listing anything.

    Raises NotFoundError when a non-directory is met before the last
    segment.
    """
    entry = root
    for segment in path.strip("/").split("/"):
        if not segment:
            continue
        if not entry.is_dir():
            raise NotFoundError(entry, f"{entry.path_for_printing} is not a directory")
        entry = entry.make_child_entry(segment)
    return entry


def walk(entry):
    """Yield ``entry`` and its descendants depth-first."""
    yield entry
    if entry.is_dir():
        for child in entry.children():
            yield from walk(child)


class NonexistentEntry(BaseEntry):
    """Detached entry for a name the parent can never hold."""

    def exists(self):
        return False
