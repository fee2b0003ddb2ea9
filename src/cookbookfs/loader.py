from cookbookfs.errors import LoadError
from cookbookfs.interfaces import ICookbookVersion
from cookbookfs.interfaces import ILoader
from zope.interface import implementer

import hashlib
import json
import logging
import os
import re


logger = logging.getLogger(__name__)

_METADATA_RB_RE = re.compile(r"""^\s*(name|version)\s+['"]([^'"]+)['"]""", re.MULTILINE)

DEFAULT_VERSION = "0.0.0"

SEGMENTS = (
    "attributes",
    "definitions",
    "files",
    "libraries",
    "providers",
    "recipes",
    "resources",
    "templates",
)
ROOT_FILES = "root_files"


class LoadedFile:
    """One file of a loaded cookbook, relative to its root."""

    def __init__(self, path, checksum, segment):
        self.path = path
        self.checksum = checksum
        self.segment = segment

    @property
    def name(self):
        return self.path.rsplit("/", 1)[-1]

    def __repr__(self):
        return f"<LoadedFile {self.path} {self.checksum}>"


@implementer(ICookbookVersion)
class CookbookVersion:
    def __init__(self, name, version, root_dir, files=(), metadata=None):
        self.name = name
        self.version = version
        self.root_dir = root_dir
        self.files = sorted(files, key=lambda f: f.path)
        self.metadata = metadata or {}
        self.frozen = False

    @property
    def full_name(self):
        return f"{self.name}-{self.version}"

    def freeze_version(self):
        self.frozen = True

    def checksums(self):
        return {f.checksum: f.path for f in self.files}

    def manifest(self):
        """The cookbook version document stored by the server."""
        doc = {
            "name": self.full_name,
            "cookbook_name": self.name,
            "version": self.version,
            "json_class": "Chef::CookbookVersion",
            "chef_type": "cookbook_version",
            "frozen?": self.frozen,
            "metadata": dict(self.metadata, name=self.name, version=self.version),
        }
        for f in self.files:
            doc.setdefault(f.segment, []).append(
                {
                    "name": f.name,
                    "path": f.path,
                    "checksum": f.checksum,
                    "specificity": "default",
                }
            )
        return doc

    def __repr__(self):
        return f"<CookbookVersion {self.full_name}>"


@implementer(ILoader)
class CookbookLoader:
    """Loads a cookbook directory.

    The cookbook is named after the directory it is loaded from. A name
    declared in the metadata is kept in ``metadata`` but not used.
    """

    def load(self, path, chefignore=None):
        if not os.path.isdir(path):
            raise LoadError(f"cookbook directory {path} does not exist")
        metadata = self._read_metadata(path)
        name = os.path.basename(os.path.normpath(path))
        version = metadata.get("version") or DEFAULT_VERSION
        files = list(self._walk(path, chefignore))
        logger.debug("Loaded %s-%s from %s: %d files", name, version, path, len(files))
        return CookbookVersion(name, version, path, files, metadata)

    def _read_metadata(self, path):
        json_path = os.path.join(path, "metadata.json")
        rb_path = os.path.join(path, "metadata.rb")
        try:
            if os.path.isfile(json_path):
                with open(json_path, encoding="utf-8") as f:
                    metadata = json.load(f)
                if not isinstance(metadata, dict):
                    raise LoadError(f"{json_path} is not a JSON object")
                return metadata
            if os.path.isfile(rb_path):
                with open(rb_path, encoding="utf-8") as f:
                    return dict(_METADATA_RB_RE.findall(f.read()))
        except (OSError, ValueError) as e:
            raise LoadError(f"cannot read metadata in {path}: {e}") from e
        return {}

    def _walk(self, path, chefignore):
        for dirpath, dirnames, filenames in os.walk(path):
            dirnames.sort()
            for filename in sorted(filenames):
                full_path = os.path.join(dirpath, filename)
                relative = os.path.relpath(full_path, path).replace(os.sep, "/")
                if chefignore is not None and chefignore.ignored(relative):
                    continue
                yield LoadedFile(relative, _md5(full_path), _segment(relative))


def _segment(relative):
    top = relative.split("/", 1)[0]
    if top != relative and top in SEGMENTS:
        return top
    return ROOT_FILES


def _md5(path):
    digest = hashlib.md5()
    try:
        with open(path, "rb") as f:
            for chunk in iter(lambda: f.read(65536), b""):
                digest.update(chunk)
    except OSError as e:
        raise LoadError(f"cannot read {path}: {e}") from e
    return digest.hexdigest()
