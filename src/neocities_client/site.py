"""Operations on a NeoCities site.

A Site holds what is needed to authenticate against the NeoCities API
and, after ``get_info``, information about the site itself.

Some API calls require the key to be set and others do not. Calls that
need a key raise MissingKeyError before sending anything when the site
has none.
"""

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Union

import httpx

from .api_clients.base_client import (
    APIKind,
    MissingKeyError,
    MissingRequiredFieldError,
    NeocitiesAPIClient,
    NeocitiesError,
    ResponseDecodeError,
    SiteError,
)
from .api_clients.multipart import make_multipart_file
from .config import ClientConfig
from .models import SiteFile, SiteInfo


@dataclass
class PushReport:
    """Outcome of a push: which files went up and which did not."""

    uploaded: List[str] = field(default_factory=list)
    failed: Dict[str, Exception] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed


class Site:
    """A NeoCities site, both for authentication and information grabbing."""

    def __init__(
        self,
        site_name: str = "",
        key: str = "",
        config: Optional[ClientConfig] = None,
        http_client: Optional[httpx.Client] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize a site.

        Args:
            site_name: Name of the site, needed by get_info
            key: API key, needed by upload, delete and list
            config: API location and timeout settings
            http_client: Shared httpx client used by every API client built here
            logger: Logger for progress and push failures
        """
        self.site_name = site_name
        self.key = key
        self.info = SiteInfo()
        self.config = config or ClientConfig()
        self.http_client = http_client
        self.logger = logger or logging.getLogger(__name__)

    def __repr__(self) -> str:
        return f"Site(site_name={self.site_name!r}, key={'***' if self.key else ''!r})"

    def new_api_client(
        self, api: Union[APIKind, str], require_key: bool = True
    ) -> NeocitiesAPIClient:
        """Build an API client for one endpoint of this site.

        Args:
            api: Endpoint the client targets
            require_key: Raise when the site has no key

        Returns:
            The API client, authenticated when the site has a key

        Raises:
            MissingKeyError: If require_key is set and the key is empty. The
                fully built client is available on the exception.
        """
        client = NeocitiesAPIClient(
            api,
            base_url=self.config.base_url,
            key=self.key,
            http_client=self.http_client,
            timeout=self.config.timeout,
        )
        if not self.key and require_key:
            raise MissingKeyError(client=client)
        return client

    def _client_for(
        self,
        api: APIKind,
        client: Optional[NeocitiesAPIClient],
        require_key: bool = True,
    ) -> NeocitiesAPIClient:
        if client is not None:
            return client
        try:
            return self.new_api_client(api, require_key=require_key)
        except MissingKeyError as e:
            if e.client is not None:
                e.client.close()
            raise

    def _check_response(self, api: APIKind, response: httpx.Response) -> None:
        if response.status_code != 200:
            raise SiteError(api, response)

    def upload_file(
        self,
        file: Union[str, Path],
        name: str = "",
        client: Optional[NeocitiesAPIClient] = None,
    ) -> None:
        """Upload a file to the site.

        Args:
            file: Local path of the file; cannot be empty
            name: Remote name; defaults to the base name of ``file``
            client: API client to reuse; a new one is built when None

        Raises:
            MissingKeyError: If no client is given and the site has no key
            ValueError: If ``file`` is empty
            OSError: If the file cannot be opened or read
            SiteError: If the API rejects the upload
            NetworkError: If the host cannot be reached
        """
        owned = client is None
        client = self._client_for(APIKind.UPLOAD, client)
        try:
            if not file:
                raise ValueError("no file provided")

            if not name:
                name = os.path.basename(file)

            with open(file, "rb") as f:
                body, content_type = make_multipart_file(f, name)

            request = client.new_api_request(
                body, headers={"Content-Type": content_type}
            )

            self.logger.info(f"NeoCities: uploading {file} as {name}.")
            response = client.send(request)
            self._check_response(APIKind.UPLOAD, response)
        finally:
            if owned:
                client.close()

    def push(
        self,
        directory: Union[str, Path],
        client: Optional[NeocitiesAPIClient] = None,
    ) -> PushReport:
        """Push a directory and all of its subdirectories to the site.

        Every file is uploaded under its path relative to the current
        working directory, so the remote layout mirrors the local one. Be
        careful: everything below ``directory`` is uploaded.

        A file that fails to upload is logged and recorded in the report;
        the rest of the push carries on.

        Raises:
            MissingKeyError: If no client is given and the site has no key
            FileNotFoundError: If ``directory`` does not exist
        """
        owned = client is None
        client = self._client_for(APIKind.UPLOAD, client)
        report = PushReport()
        try:
            root = Path(directory)
            if not root.exists():
                raise FileNotFoundError(f"No such file or directory: '{directory}'")

            for path in self._walk_files(root):
                remote_name = path.as_posix()
                try:
                    self.upload_file(remote_name, remote_name, client)
                except (NeocitiesError, OSError) as e:
                    self.logger.warning(f"NeoCities: failed to upload {remote_name}: {e}")
                    report.failed[remote_name] = e
                else:
                    report.uploaded.append(remote_name)
        finally:
            if owned:
                client.close()

        self.logger.info(
            f"NeoCities: pushed {len(report.uploaded)} files, {len(report.failed)} failed."
        )
        return report

    def _walk_files(self, path: Path, root: bool = True) -> Iterator[Path]:
        """Yield files below path depth-first, entries in lexical order.

        Symlinks below the root are yielded as entries, never descended
        into. An unreadable subdirectory is logged and skipped; an
        unreadable root propagates.
        """
        if not path.is_dir() or (not root and path.is_symlink()):
            yield path
            return

        try:
            entries = sorted(path.iterdir(), key=lambda p: p.name)
        except OSError as e:
            if root:
                raise
            self.logger.warning(f"NeoCities: cannot read directory {path}: {e}")
            return

        for entry in entries:
            yield from self._walk_files(entry, root=False)

    def delete_files(
        self, *files: str, client: Optional[NeocitiesAPIClient] = None
    ) -> None:
        """Delete a set of files from the site in one request.

        Raises:
            MissingKeyError: If no client is given and the site has no key
            SiteError: If the API rejects the deletion
            NetworkError: If the host cannot be reached
        """
        owned = client is None
        client = self._client_for(APIKind.DELETE, client)
        try:
            request = client.new_api_request(data={"filenames[]": list(files)})

            self.logger.info(f"NeoCities: deleting {list(files)}.")
            response = client.send(request)
            self._check_response(APIKind.DELETE, response)
        finally:
            if owned:
                client.close()

    def get_info(self, client: Optional[NeocitiesAPIClient] = None) -> "Site":
        """Fill in ``info`` from the info endpoint.

        Fields present in the response overwrite the current values; the
        rest are kept. No key is needed.

        Returns:
            This same Site

        Raises:
            MissingRequiredFieldError: If site_name is empty
            SiteError: If the API answers with an error
            NetworkError: If the host cannot be reached
        """
        if not self.site_name:
            raise MissingRequiredFieldError("site_name")

        owned = client is None
        client = self._client_for(APIKind.INFO, client, require_key=False)
        try:
            request = client.new_api_request(params={"sitename": self.site_name})
            response = client.send(request)
            self._check_response(APIKind.INFO, response)
            payload = self._decode_json(APIKind.INFO, response)
        finally:
            if owned:
                client.close()

        info = payload.get("info") if isinstance(payload, dict) else None
        if isinstance(info, dict):
            merged = self.info.model_dump()
            merged.update(info)
            try:
                self.info = SiteInfo.model_validate(merged)
            except ValueError as e:
                raise ResponseDecodeError(f"Invalid site info in response: {e}")

        return self

    def list_files(
        self, path: str = "", client: Optional[NeocitiesAPIClient] = None
    ) -> List[SiteFile]:
        """List the files under ``path`` on the site, in server order.

        Raises:
            MissingKeyError: If no client is given and the site has no key
            SiteError: If the API answers with an error
            ResponseDecodeError: If the listing cannot be decoded
            NetworkError: If the host cannot be reached
        """
        owned = client is None
        client = self._client_for(APIKind.LIST, client)
        try:
            request = client.new_api_request(params={"path": path})
            response = client.send(request)
            self._check_response(APIKind.LIST, response)
            payload = self._decode_json(APIKind.LIST, response)
        finally:
            if owned:
                client.close()

        files = payload.get("files", []) if isinstance(payload, dict) else None
        if not isinstance(files, list):
            raise ResponseDecodeError("List response has no files array")

        try:
            return [SiteFile.model_validate(f) for f in files]
        except ValueError as e:
            raise ResponseDecodeError(f"Invalid file entry in list response: {e}")

    def _decode_json(self, api: APIKind, response: httpx.Response):
        try:
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ResponseDecodeError(
                f"Invalid JSON in {api.value} response: {e}", response.status_code
            )
