# gitlab/api_client.py
from __future__ import annotations

import http.client
import json
import urllib.error
import urllib.request
from typing import Any, BinaryIO, Optional
from urllib.parse import quote, urlencode

from buildartifacts.deadline import Deadline
from buildartifacts.errors import ApiError, DecodeError
from buildartifacts.ui.console import get_console

CHUNK_SIZE = 1024 * 1024

# 300 is accepted on purpose: the tool has always treated [200, 300] as success
SUCCESS_MIN = 200
SUCCESS_MAX = 300


def is_success(status_code: int) -> bool:
    return SUCCESS_MIN <= status_code <= SUCCESS_MAX


class _NoRedirect(urllib.request.HTTPRedirectHandler):
    """Hand 3xx responses back as HTTPError instead of following them."""

    def redirect_request(self, req, fp, code, msg, headers, newurl):
        # PRIVATE-TOKEN must never reach the Location host
        return None


_opener = urllib.request.build_opener(_NoRedirect)


def open_url(req: urllib.request.Request, **kwargs):
    return _opener.open(req, **kwargs)


class APIClient:
    """HTTP client for the GitLab v4 REST API."""

    def __init__(self, base_url: str, token: str, deadline: Optional[Deadline] = None):
        """
        Initialize API client.

        Args:
            base_url: GitLab root URL (e.g., "https://gitlab.com")
            token: Private token sent as PRIVATE-TOKEN on every request
            deadline: Optional time budget shared by all requests
        """
        # Ensure base_url doesn't end with /
        self.base_url = base_url.rstrip("/")
        self._token = token
        self.deadline = deadline or Deadline()

    def __repr__(self) -> str:
        return f"APIClient(base_url={self.base_url!r})"

    def _project_url(self, project: str) -> str:
        # "group/project" paths must be sent as a single encoded segment
        return f"{self.base_url}/api/v4/projects/{quote(str(project), safe='')}"

    def jobs_url(self, project: str, page_size: int) -> str:
        query = urlencode([("scope[]", "success"), ("per_page", page_size)])
        return f"{self._project_url(project)}/jobs?{query}"

    def artifacts_url(self, project: str, job_id: int | str) -> str:
        return f"{self._project_url(project)}/jobs/{quote(str(job_id), safe='')}/artifacts"

    def _network_error(self, url: str, cause, during: str) -> ApiError:
        # socket timeouts are derived from the deadline; an expired budget wins
        self.deadline.check(during)
        return ApiError(status_code=None, url=url, reason=str(cause) or type(cause).__name__)

    def _copy(self, response, sink: BinaryIO, url: str) -> None:
        during = f"download of {url}"
        while True:
            self.deadline.check(during)
            try:
                chunk = response.read(CHUNK_SIZE)
            except (OSError, http.client.HTTPException) as e:
                raise self._network_error(url, e, during) from e
            if not chunk:
                break
            # sink errors (disk full, closed file) are the caller's to report
            sink.write(chunk)

    def _read(self, response, url: str) -> bytes:
        try:
            return response.read()
        except (OSError, http.client.HTTPException) as e:
            raise self._network_error(url, e, f"download of {url}") from e

    def get(self, url: str, sink: Optional[BinaryIO] = None) -> bytes:
        """
        Make an authenticated GET request.

        Args:
            url: Absolute API URL
            sink: Optional writable binary file; when given the body is
                  streamed into it chunk by chunk and b"" is returned

        Returns:
            Raw response body (empty when streamed to sink)

        Raises:
            ApiError: On a status outside [200, 300] or a network failure
            DeadlineExceeded: If the run's time budget runs out
        """
        get_console().print_request(url)

        req = urllib.request.Request(url, headers={"PRIVATE-TOKEN": self._token}, method="GET")
        kwargs = {}
        timeout = self.deadline.remaining(f"request to {url}")
        if timeout is not None:
            kwargs["timeout"] = timeout

        try:
            with open_url(req, **kwargs) as response:
                status = response.status
                if not is_success(status):
                    raise ApiError(status_code=status, body=self._read(response, url), url=url)
                if sink is None:
                    return self._read(response, url)
                self._copy(response, sink, url)
                return b""
        except urllib.error.HTTPError as e:
            # raised for anything outside 2xx: 300 and the unfollowed redirects
            if not is_success(e.code):
                error_body = e.read() if e.fp else b""
                raise ApiError(status_code=e.code, body=error_body, url=url) from None
            if sink is None:
                return self._read(e, url)
            self._copy(e, sink, url)
            return b""
        except urllib.error.URLError as e:
            raise self._network_error(url, e.reason, f"request to {url}") from e
        except (TimeoutError, ConnectionError, http.client.HTTPException) as e:
            raise self._network_error(url, e, f"request to {url}") from e

    def get_json(self, url: str) -> Any:
        """
        Make an API call and decode the JSON body.

        Raises:
            ApiError: As get()
            DecodeError: If the body is not valid JSON
        """
        raw = self.get(url)
        try:
            return json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise DecodeError(message=f"Can't decode GitLab API response: {e}", body=raw) from e
