from cookbookfs.errors import RestOperationError
from cookbookfs.errors import UploadError
from cookbookfs.interfaces import IUploader
from zope.interface import implementer

import base64
import logging
import os


logger = logging.getLogger(__name__)


@implementer(IUploader)
class CookbookUploader:
    """Uploads a loaded cookbook version through a sandbox.

    File content is read from ``cookbooks_root/<cookbook name>``; the
    root is a per-call argument and defaults to the directory the
    cookbook was loaded from.
    """

    def __init__(self, session=None):
        self.session = session

    def upload(self, cookbook, force=False, session=None, cookbooks_root=None):
        session = session or self.session
        if session is None:
            raise UploadError(f"no session to upload {cookbook.full_name} with")
        if cookbooks_root is None:
            cookbook_dir = cookbook.root_dir
        else:
            cookbook_dir = os.path.join(cookbooks_root, cookbook.name)
        if not os.path.isdir(cookbook_dir):
            raise UploadError(f"cookbook directory {cookbook_dir} does not exist")

        logger.info("Uploading %s", cookbook.full_name)
        try:
            self._upload_files(session, cookbook, cookbook_dir)
            params = {"force": "true"} if force else None
            session.put_json(
                f"cookbooks/{cookbook.name}/{cookbook.version}",
                cookbook.manifest(),
                params=params,
            )
        except RestOperationError as e:
            if e.status_code == 409:
                raise UploadError(
                    f"{cookbook.full_name} is frozen on the server", 409
                ) from e
            raise UploadError(
                f"upload of {cookbook.full_name} failed: {e}", e.status_code
            ) from e
        logger.info("Uploaded %s", cookbook.full_name)

    def _upload_files(self, session, cookbook, cookbook_dir):
        checksums = cookbook.checksums()
        if not checksums:
            return
        sandbox = session.post_json(
            "sandboxes", {"checksums": {checksum: None for checksum in checksums}}
        )
        try:
            uri = sandbox["uri"]
            pending = [
                (checksum, info["url"])
                for checksum, info in sorted(sandbox["checksums"].items())
                if info.get("needs_upload")
            ]
        except (AttributeError, KeyError, TypeError) as e:
            raise UploadError(
                f"unexpected sandbox response for {cookbook.full_name}"
            ) from e
        for checksum, url in pending:
            if checksum not in checksums:
                raise UploadError(
                    f"sandbox for {cookbook.full_name} asks for unknown "
                    f"checksum {checksum}"
                )
            path = os.path.join(cookbook_dir, checksums[checksum])
            try:
                with open(path, "rb") as f:
                    data = f.read()
            except OSError as e:
                raise UploadError(f"cannot read {path}: {e}") from e
            logger.debug("Uploading %s (%s)", checksums[checksum], checksum)
            session.put_bytes(
                url,
                data,
                headers={
                    "Content-Type": "application/x-binary",
                    "Content-MD5": base64.b64encode(bytes.fromhex(checksum)).decode(),
                },
            )
        session.put_json(uri, {"is_completed": True})
