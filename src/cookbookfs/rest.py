from cookbookfs.errors import RemoteListingError
from cookbookfs.errors import RestOperationError
from cookbookfs.interfaces import ISession
from zope.interface import implementer

import httpx
import logging
import re


logger = logging.getLogger(__name__)


@implementer(ISession)
class RestSession:
    """Thin httpx wrapper for a Chef server REST API.

    Paths are relative to the API base (server URL, plus
    ``organizations/<org>`` when an organization is given). Absolute URLs
    are used as-is. No retries: a failed request raises at once.
    """

    def __init__(
        self,
        server_url,
        organization=None,
        client_name="cookbookfs",
        timeout=60,
        verify_ssl=True,
        transport=None,
    ):
        if not re.match(r"^https?://", server_url or ""):
            raise ValueError(f"server-url must be an http(s) URL: {server_url!r}")
        base_url = server_url.rstrip("/")
        if organization:
            if not re.fullmatch(r"[a-z0-9_-]+", organization):
                raise ValueError(
                    f"organization contains invalid characters: {organization!r}"
                )
            base_url = f"{base_url}/organizations/{organization}"
        self.base_url = base_url
        self.client_name = client_name
        if not verify_ssl:
            logger.warning("TLS verification is disabled for %s", base_url)

        kwargs = {
            "base_url": base_url,
            "timeout": timeout,
            "verify": verify_ssl,
            "headers": {
                "Accept": "application/json",
                "User-Agent": f"cookbookfs ({client_name})",
                "X-Ops-UserId": client_name,
            },
        }
        if transport is not None:
            kwargs["transport"] = transport
        self._client = httpx.Client(**kwargs)

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def close(self):
        self._client.close()

    def _request(self, method, url, error_class, **kwargs):
        logger.debug("%s %s", method, url)
        try:
            response = self._client.request(method, url, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.debug("%s %s failed: %s", method, url, e)
            raise error_class(f"{method} {url} failed: HTTP {status}", status) from e
        except httpx.HTTPError as e:
            logger.debug("%s %s failed: %s", method, url, e)
            raise error_class(
                f"{method} {url} failed: {e.__class__.__name__}"
            ) from e
        return response

    def _decode(self, response, method, url, error_class):
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise error_class(
                f"{method} {url} returned invalid JSON", response.status_code
            ) from e

    def get_json(self, path, params=None):
        response = self._request("GET", path, RemoteListingError, params=params)
        return self._decode(response, "GET", path, RemoteListingError)

    def put_json(self, path, body, params=None):
        response = self._request(
            "PUT", path, RestOperationError, json=body, params=params
        )
        return self._decode(response, "PUT", path, RestOperationError)

    def post_json(self, path, body, params=None):
        response = self._request(
            "POST", path, RestOperationError, json=body, params=params
        )
        return self._decode(response, "POST", path, RestOperationError)

    def get_bytes(self, url):
        return self._request("GET", url, RemoteListingError).content

    def put_bytes(self, url, data, headers=None):
        self._request("PUT", url, RestOperationError, content=data, headers=headers)
