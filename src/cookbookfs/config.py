"""ZConfig factories.

``component.xml`` declares the ``chefserver`` and ``chefrepo`` section
types; ``schema.xml`` uses both for standalone configuration files::

    <chefserver>
        server-url https://chef.example.com
        organization acme
    </chefserver>
    <chefrepo>
        repo-path /srv/chef-repo
    </chefrepo>
"""

from cookbookfs.staging import CopyingStagingFilesystem
from cookbookfs.staging import SymlinkStagingFilesystem

import os
import ZConfig


SCHEMA_PATH = os.path.join(os.path.dirname(__file__), "schema.xml")

STAGING_MODES = {
    "symlink": SymlinkStagingFilesystem,
    "copy": CopyingStagingFilesystem,
}


def staging_mode(value):
    value = value.lower()
    if value not in STAGING_MODES:
        raise ValueError(
            f"staging-mode must be one of {', '.join(sorted(STAGING_MODES))}: {value!r}"
        )
    return value


class BaseConfig:
    def __init__(self, config):
        self.config = config
        self.name = config.getSectionName()

    def open(self):
        raise NotImplementedError


class ChefServerFactory(BaseConfig):
    def staging_filesystem(self):
        config = self.config
        return STAGING_MODES[config.staging_mode](temp_dir=config.staging_dir)

    def open(self):
        from cookbookfs.loader import CookbookLoader
        from cookbookfs.rest import RestSession
        from cookbookfs.server import ChefServerRootDir
        from cookbookfs.uploader import CookbookUploader

        config = self.config
        session = RestSession(
            config.server_url,
            organization=config.organization,
            client_name=config.client_name,
            timeout=config.timeout,
            verify_ssl=config.verify_ssl,
        )
        return ChefServerRootDir(
            session,
            loader=CookbookLoader(),
            uploader=CookbookUploader(session),
            staging=self.staging_filesystem(),
        )


class ChefRepoFactory(BaseConfig):
    def open(self):
        from cookbookfs.repository import RepositoryRootDir

        return RepositoryRootDir(self.config.repo_path)


def load_config(source):
    """Load a configuration file path or open file against ``schema.xml``."""
    schema = ZConfig.loadSchema(SCHEMA_PATH)
    if hasattr(source, "read"):
        config, _handlers = ZConfig.loadConfigFile(schema, source)
    else:
        config, _handlers = ZConfig.loadConfig(schema, source)
    return config
