import fnmatch
import logging
import os


logger = logging.getLogger(__name__)


class Chefignore:
    """Glob patterns from a ``chefignore`` file.

    Patterns are matched against paths relative to a cookbook directory.
    A missing file ignores nothing.
    """

    def __init__(self, directory):
        self.path = os.path.join(directory, "chefignore")
        self.patterns = []
        if os.path.isfile(self.path):
            with open(self.path, encoding="utf-8") as f:
                for line in f:
                    line = line.strip()
                    if line and not line.startswith("#"):
                        self.patterns.append(line)
            logger.debug("%s: %d patterns", self.path, len(self.patterns))

    def ignored(self, relative_path):
        relative_path = relative_path.replace(os.sep, "/")
        return any(fnmatch.fnmatchcase(relative_path, p) for p in self.patterns)

    def __repr__(self):
        return f"<Chefignore {self.path} ({len(self.patterns)} patterns)>"
