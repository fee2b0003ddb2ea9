from cookbookfs.cookbooks import VersionedCookbooksDir
from cookbookfs.entry import BaseDirectory
from cookbookfs.entry import NonexistentEntry
from cookbookfs.interfaces import IRoot
from zope.interface import implementer


@implementer(IRoot)
class ChefServerRootDir(BaseDirectory):
    """Root of the server tree.

    Owns the session and the collaborators used when cookbooks are
    uploaded through this tree. Only ``/cookbooks`` is exposed.
    """

    api_path = ""

    def __init__(self, session, loader=None, uploader=None, staging=None):
        super().__init__("", None)
        self.session = session
        self.loader = loader
        self.uploader = uploader
        self.staging = staging

    @property
    def path_for_printing(self):
        return f"{self.session.base_url}/"

    def get_json(self, path, params=None):
        return self.session.get_json(path, params=params)

    def _identity(self):
        return (type(self), self.session.base_url)

    def _list_children(self):
        return [VersionedCookbooksDir("cookbooks", self)]

    def _make_detached(self, name):
        if name == "cookbooks":
            return VersionedCookbooksDir(name, self)
        return NonexistentEntry(name, self)

    def can_have_child(self, name, is_dir):
        return bool(is_dir) and name == "cookbooks"

    def __repr__(self):
        return f"<{self.__class__.__name__} {self.session.base_url}>"
