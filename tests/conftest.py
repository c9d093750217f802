import http.server
import io
import json
import threading
import urllib.error
import zipfile
from pathlib import Path
from unittest.mock import patch

import pytest

from buildartifacts.model import PipelineConfig
from buildartifacts.ui.console import Console, set_console

API = "https://gitlab.example.com"
TOKEN = "glpat-secret-token"
PROJECT = "group/app"


class FakeResponse(io.BytesIO):
    """Stands in for the response object returned by the client's opener."""

    def __init__(self, body: bytes = b"", status: int = 200, on_read=None):
        super().__init__(body)
        self.status = status
        self.read_sizes = []
        self.on_read = on_read

    def read(self, n=-1):
        self.read_sizes.append(n)
        if self.on_read is not None:
            self.on_read()
        return super().read(n)


class FakeGitLab:
    """
    Routes the client's open_url calls by full URL.

    Codes outside 2xx raise HTTPError, like the client's opener does: it
    never follows redirects, so 301/302 surface as errors too.
    """

    def __init__(self):
        self.routes = {}
        self.requests = []
        self.responses = []

    def add(self, url, body=b"", status=200, on_read=None):
        if not isinstance(body, bytes):
            body = json.dumps(body).encode("utf-8")
        self.routes[url] = (status, body, on_read)

    def urlopen(self, req, timeout=None):
        self.requests.append(req)
        if req.full_url not in self.routes:
            raise AssertionError(f"unexpected request to {req.full_url}")
        status, body, on_read = self.routes[req.full_url]
        if 200 <= status < 300:
            response = FakeResponse(body, status, on_read)
            self.responses.append(response)
            return response
        raise urllib.error.HTTPError(req.full_url, status, "error", None, io.BytesIO(body))


@pytest.fixture(autouse=True)
def console():
    c = Console(debug=False)
    set_console(c)
    return c


@pytest.fixture
def gitlab():
    fake = FakeGitLab()
    with patch("buildartifacts.gitlab.api_client.open_url", side_effect=fake.urlopen):
        yield fake


class LoopbackHandler(http.server.BaseHTTPRequestHandler):
    """Answers from server.routes: path -> callable(handler)."""

    def do_GET(self):
        self.server.seen.append((self.path, self.headers.get("PRIVATE-TOKEN")))
        route = self.server.routes.get(self.path)
        if route is None:
            self.send_error(404)
            return
        route(self)

    def log_message(self, format, *args):
        pass


def reply(status, body=b"", headers=None):
    def _reply(handler):
        handler.send_response(status)
        for name, value in (headers or {}).items():
            handler.send_header(name, value)
        handler.send_header("Content-Length", str(len(body)))
        handler.end_headers()
        handler.wfile.write(body)
    return _reply


@pytest.fixture
def loopback(monkeypatch):
    """A real HTTP server on 127.0.0.1, for behavior the urlopen fake can't show."""
    monkeypatch.setenv("no_proxy", "*")
    monkeypatch.setenv("NO_PROXY", "*")
    server = http.server.ThreadingHTTPServer(("127.0.0.1", 0), LoopbackHandler)
    server.routes = {}
    server.seen = []
    server.release = threading.Event()
    server.url = f"http://127.0.0.1:{server.server_address[1]}"
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield server
    server.release.set()
    server.shutdown()
    server.server_close()
    thread.join()


@pytest.fixture
def project(tmp_path):
    root = tmp_path / "project"
    (root / "public").mkdir(parents=True)
    return root


@pytest.fixture
def make_config(project, tmp_path):
    def _make(**overrides):
        values = dict(
            api_base_url=API,
            auth_token=TOKEN,
            project_id=PROJECT,
            destination_dir=project / "public",
            project_root=project,
            storage_dir=tmp_path / "storage",
        )
        values.update(overrides)
        return PipelineConfig(**values)
    return _make


def job(id, status="success", stage="prepare", ref="main", tag=False, **extra):
    record = {
        "id": id,
        "status": status,
        "stage": stage,
        "ref": ref,
        "tag": tag,
        "created_at": "2024-03-01T10:15:00.000Z",
        "runner": {"id": 12, "description": "shared-runner-1"},
        "user": {"username": "deploybot"},
    }
    record.update(extra)
    return record


def make_zip(entries: dict) -> bytes:
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for name, data in entries.items():
            zf.writestr(name, data)
    return buf.getvalue()


def tree(root: Path) -> dict:
    return {
        p.relative_to(root).as_posix(): p.read_bytes()
        for p in sorted(root.rglob("*"))
        if p.is_file()
    }
