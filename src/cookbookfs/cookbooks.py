"""Server-side versioned cookbooks.

``/cookbooks`` lists every version of every cookbook as its own
directory::

    apache2-1.0.0
    apache2-1.0.1
    mysql-2.0.5
"""

from cookbookfs import names
from cookbookfs.entry import BaseDirectory
from cookbookfs.entry import BaseEntry
from cookbookfs.errors import NotFoundError
from cookbookfs.errors import RemoteListingError
from cookbookfs.interfaces import IFileEntry
from cookbookfs.loader import ROOT_FILES
from cookbookfs.loader import SEGMENTS
from cookbookfs.upload import upload_versioned_cookbook
from zope.interface import implementer

import logging


logger = logging.getLogger(__name__)


class _Tree(dict):
    """Directory node while building a manifest tree."""


class VersionedCookbooksDir(BaseDirectory):
    def __init__(self, name, parent):
        super().__init__(name, parent)
        self.api_path = _api_join(parent.api_path, name)

    def _list_children(self):
        listing = self.root.get_json(self.api_path, params={"num_versions": "all"})
        result = []
        try:
            for cookbook_name, cookbook in (listing or {}).items():
                for cookbook_version in cookbook["versions"]:
                    name = names.join(cookbook_name, cookbook_version["version"])
                    result.append(VersionedCookbookDir(name, self))
        except (AttributeError, KeyError, TypeError) as e:
            raise RemoteListingError(
                f"unexpected cookbook listing from {self.api_path}"
            ) from e
        # Plain lexical order, so 1.10.0 sorts before 1.2.0.
        result.sort(key=lambda child: child.name)
        logger.debug("%s: %d cookbook versions", self.path, len(result))
        return result

    def _make_detached(self, name):
        return VersionedCookbookDir(name, self)

    def can_have_child(self, name, is_dir):
        return bool(is_dir) and names.matches(name)

    def upload_cookbook(self, other, options):
        """Upload the local versioned cookbook ``other`` to this server."""
        root = self.root
        upload_versioned_cookbook(
            other,
            options,
            session=root.session,
            loader=root.loader,
            uploader=root.uploader,
            staging=root.staging,
        )

    def create_child_from(self, other, options=None):
        self.upload_cookbook(other, options or {})
        return self.make_child_entry(other.name)


class VersionedCookbookDir(BaseDirectory):
    """One ``{cookbook}-{version}`` on the server.

    Names outside the grammar make an entry that never exists.
    """

    def __init__(self, name, parent):
        super().__init__(name, parent)
        if names.matches(name):
            self.cookbook_name, self.version = names.parse(name)
            self.api_path = _api_join(
                parent.api_path, f"{self.cookbook_name}/{self.version}"
            )
        else:
            self.cookbook_name = self.version = self.api_path = None
        self._manifest = None

    def exists(self):
        if self.cookbook_name is None:
            return False
        if self.parent._children is not None:
            return super().exists()
        try:
            self._load_manifest()
        except NotFoundError:
            return False
        return True

    def _load_manifest(self):
        if self._manifest is None:
            if self.cookbook_name is None:
                raise NotFoundError(self)
            try:
                self._manifest = self.root.get_json(self.api_path)
            except RemoteListingError as e:
                if e.status_code == 404:
                    raise NotFoundError(self) from e
                raise
        return self._manifest

    def _list_children(self):
        manifest = self._load_manifest()
        tree = _Tree()
        for segment in SEGMENTS + (ROOT_FILES,):
            for record in manifest.get(segment) or ():
                node = tree
                *dirs, filename = record["path"].split("/")
                for d in dirs:
                    node = node.setdefault(d, _Tree())
                node[filename] = record
        return _materialize(tree, self)

    def _make_detached(self, name):
        if name in SEGMENTS:
            return CookbookSubdir(name, self)
        return CookbookFile(name, self, None)

    def can_have_child(self, name, is_dir):
        if is_dir:
            return name in SEGMENTS
        return True


class CookbookSubdir(BaseDirectory):
    """Directory inside a cookbook version, built from its manifest.

    A detached subdirectory has no tree yet and takes it from the
    parent's listing when first listed.
    """

    def __init__(self, name, parent, tree=None):
        super().__init__(name, parent)
        self._tree = tree

    def _list_children(self):
        if self._tree is None:
            for child in self.parent.children():
                if child.name == self.name and isinstance(child, CookbookSubdir):
                    self._tree = child._tree
                    break
            else:
                raise NotFoundError(self)
        return _materialize(self._tree, self)

    def _make_detached(self, name):
        node = self._tree.get(name) if self._tree is not None else None
        if isinstance(node, _Tree):
            return CookbookSubdir(name, self, node)
        return CookbookFile(name, self, node)


@implementer(IFileEntry)
class CookbookFile(BaseEntry):
    def __init__(self, name, parent, record):
        super().__init__(name, parent)
        self.record = record

    @property
    def checksum(self):
        return self.record["checksum"] if self.record else None

    def exists(self):
        if self.record is not None:
            return True
        return super().exists()

    def read(self):
        if self.record is None:
            for child in self.parent.children():
                if child.name == self.name and isinstance(child, CookbookFile):
                    return child.read()
            raise NotFoundError(self)
        return self.root.session.get_bytes(self.record["url"])


def _materialize(tree, parent):
    result = []
    for name in sorted(tree):
        node = tree[name]
        if isinstance(node, _Tree):
            result.append(CookbookSubdir(name, parent, node))
        else:
            result.append(CookbookFile(name, parent, node))
    return result


def _api_join(base, name):
    return f"{base}/{name}" if base else name
