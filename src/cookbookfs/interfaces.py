from zope.interface import Attribute
from zope.interface import Interface


class IEntry(Interface):
    """A node in a cookbook tree, directory or leaf."""

    name = Attribute("Name, unique among siblings")
    parent = Attribute("Parent entry, or None for a root")
    path = Attribute("Slash-separated path derived from the parent chain")
    path_for_printing = Attribute("Path as shown to users")
    root = Attribute("Topmost entry of the tree")

    def is_dir():
        """Return True for directory entries."""

    def exists():
        """Ask the backend whether this entry exists."""


class IDirectoryEntry(IEntry):
    """An entry with children."""

    def children():
        """Return the ordered child entries, listing the backend once."""

    def child(name):
        """Return the entry for ``name`` without listing the backend."""

    def make_child_entry(name):
        """Return the cached child called ``name`` or a new detached entry."""

    def can_have_child(name, is_dir):
        """Structural check, no I/O: could ``name`` live in this directory?"""


class IFileEntry(IEntry):
    """A leaf entry with content."""

    def read():
        """Return the file content as bytes."""


class ISession(Interface):
    """REST transport used by server-side entries and the uploader."""

    def get_json(path, params=None):
        """GET ``path`` relative to the API base and decode the JSON body."""

    def put_json(path, body, params=None):
        """PUT a JSON body and return the decoded response."""

    def post_json(path, body, params=None):
        """POST a JSON body and return the decoded response."""

    def get_bytes(url):
        """GET raw content from an absolute or API-relative URL."""

    def put_bytes(url, data, headers=None):
        """PUT raw content to an absolute or API-relative URL."""


class IRoot(IDirectoryEntry):
    """Root of a server-backed tree."""

    session = Attribute("ISession used for every request below this root")
    api_path = Attribute("API path of the root, relative to the session base")

    def get_json(path, params=None):
        """Delegate to the session."""


class ICookbookVersion(Interface):
    """Loaded cookbook content ready for upload."""

    name = Attribute("Cookbook name")
    version = Attribute("Dotted-numeric version string")
    root_dir = Attribute("Directory the content was loaded from")
    files = Attribute("Loaded files, sorted by relative path")
    frozen = Attribute("True once freeze_version() was called")

    def freeze_version():
        """Lock this version against future overwrite on the server."""

    def manifest():
        """Return the JSON document the server stores for this version."""


class ILoader(Interface):
    """Loads cookbook content from a directory."""

    def load(path, chefignore=None):
        """Return an ICookbookVersion or raise LoadError."""


class IUploader(Interface):
    """Pushes loaded cookbook content to a server."""

    def upload(cookbook, force=False, session=None, cookbooks_root=None):
        """Upload ``cookbook``.

        ``cookbooks_root`` is the directory that holds ``cookbook.name``;
        it applies to this call only. Raises UploadError.
        """


class IStagingFilesystem(Interface):
    """Ephemeral directories presenting a tree under another name."""

    def staging_area(prefix="cookbookfs-"):
        """Context manager yielding a fresh, uniquely named StagingArea.

        The area is released on every exit path.
        """

    def make_reference(area, target_path, name):
        """Make ``target_path`` visible as ``area.path/name``; return that path."""

    def release(area):
        """Remove the area without touching any reference target."""

    def removal_follows_references():
        """True when recursive removal would destroy reference targets."""
