"""Upload of versioned cookbook directories.

Loaders and uploaders know one directory per cookbook name, while a
versioned repository holds ``{cookbook}-{version}`` directories. Each
upload gets its own staging directory holding a single reference named
after the cookbook, pointing back at the versioned source tree, and the
uploader is told to look for cookbooks there for that call only.
"""

from cookbookfs import names
from cookbookfs.errors import InvalidVersionedName
from cookbookfs.errors import NameGrammarError
from cookbookfs.loader import CookbookLoader
from cookbookfs.staging import SymlinkStagingFilesystem
from cookbookfs.uploader import CookbookUploader

import logging


logger = logging.getLogger(__name__)


def upload_versioned_cookbook(
    source, options, session, loader=None, uploader=None, staging=None
):
    """Upload the versioned cookbook directory ``source``.

    ``source`` needs ``name`` and ``file_path``; the chefignore of its
    parent is used when there is one. ``options`` may set ``force`` and
    ``freeze``. Errors from the loader and uploader propagate unchanged
    once the staging directory is gone.
    """
    options = options or {}
    try:
        cookbook_name, version = names.parse(source.name)
    except NameGrammarError as e:
        raise InvalidVersionedName(source.name) from e

    loader = loader or CookbookLoader()
    uploader = uploader or CookbookUploader()
    staging = staging or SymlinkStagingFilesystem()
    chefignore = getattr(source.parent, "chefignore", None)

    with staging.staging_area() as area:
        proxy_path = staging.make_reference(area, source.file_path, cookbook_name)
        logger.debug("Staged %s as %s", source.file_path, proxy_path)

        cookbook = loader.load(proxy_path, chefignore)
        if options.get("freeze"):
            cookbook.freeze_version()

        uploader.upload(
            cookbook,
            force=bool(options.get("force")),
            session=session,
            cookbooks_root=area.path,
        )
    logger.info("Uploaded %s version %s", cookbook_name, version)
