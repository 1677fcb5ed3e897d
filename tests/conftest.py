# Shared fixtures: an in-memory file server (FastAPI) reached through httpx.ASGITransport.
# Created: 2026-10-19

import httpx
import pytest
from fastapi import FastAPI, UploadFile
from fastapi.responses import JSONResponse, Response

from peanutfm import lifecycle
from peanutfm.api.client import FileAPIClient
from peanutfm.config import Settings
from peanutfm.files.manager import FileManager
from peanutfm.notifications import NotificationChannel

BASE_URL = "http://testserver"
MODIFIED = "2024-01-01"


class FakeStorage:
    """Directory tree held in nested dicts; files are bytes."""

    def __init__(self):
        self.tree: dict = {
            "docs": {
                "a.txt": b"x" * 500,
                "sub": {},
            },
            "photos": {
                "cat.JPG": b"\xff\xd8" * 1200,
            },
            "readme.md": b"# hello",
        }
        self.users = {"alice": "secret"}
        self.token = "tok-123"
        self.list_calls: list[str] = []
        self.fail_list = False
        self.fail_upload: set[str] = set()
        self.fail_delete: set[str] = set()

    def resolve(self, path: str):
        node = self.tree
        for seg in [s for s in path.split("/") if s]:
            if not isinstance(node, dict) or seg not in node:
                return None
            node = node[seg]
        return node

    def parent_and_name(self, path: str):
        segments = [s for s in path.split("/") if s]
        parent = self.resolve("/".join(segments[:-1]))
        return parent, segments[-1]


def create_fake_backend(storage: FakeStorage) -> FastAPI:
    app = FastAPI()

    @app.get("/api/login")
    async def login(name: str = "", psw: str = ""):
        if not name or storage.users.get(name) != psw:
            return {"code": 401, "msg": "invalid credentials"}
        resp = JSONResponse({"code": 200})
        resp.set_cookie("token", storage.token)
        return resp

    @app.get("/api/files")
    @app.get("/api/files/{path:path}")
    async def read(path: str = "", token: str | None = None):
        node = storage.resolve(path)
        if isinstance(node, dict) or node is None:
            storage.list_calls.append(path)
        if storage.fail_list:
            return JSONResponse({"detail": "storage offline"}, status_code=500)
        if node is None:
            return JSONResponse({"detail": "not found"}, status_code=404)
        if isinstance(node, dict):
            return [
                {
                    "name": name,
                    "type": "directory" if isinstance(child, dict) else "file",
                    **({} if isinstance(child, dict) else {"size": len(child)}),
                    "last_modified": MODIFIED,
                }
                for name, child in node.items()
            ]
        if token != storage.token:
            return JSONResponse({"detail": "unauthorized"}, status_code=401)
        return Response(content=node, media_type="application/octet-stream")

    @app.post("/api/files/{path:path}")
    async def upload(path: str, file: UploadFile):
        parent, name = storage.parent_and_name(path)
        if not isinstance(parent, dict):
            return JSONResponse({"detail": "no such directory"}, status_code=404)
        if name in storage.fail_upload:
            return JSONResponse({"detail": "disk full"}, status_code=507)
        parent[name] = await file.read()
        return {"ok": True}

    @app.delete("/api/files/{path:path}")
    async def delete(path: str):
        parent, name = storage.parent_and_name(path)
        if name in storage.fail_delete:
            return JSONResponse({"detail": "permission denied"}, status_code=403)
        if not isinstance(parent, dict) or name not in parent:
            return JSONResponse({"detail": "not found"}, status_code=404)
        del parent[name]
        return {"ok": True}

    return app


@pytest.fixture(autouse=True)
def config_dir(tmp_path, monkeypatch):
    d = tmp_path / "config"
    monkeypatch.setenv("PEANUTFM_CONFIG_DIR", str(d))
    yield d
    lifecycle.reset_all()


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def backend(storage):
    return create_fake_backend(storage)


@pytest.fixture
def settings(tmp_path):
    return Settings(
        server_url=BASE_URL,
        notification_display_seconds=0.05,
        notification_exit_seconds=0.02,
        download_dir=tmp_path / "downloads",
    )


@pytest.fixture
async def http(backend):
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=backend), base_url=BASE_URL
    ) as client:
        yield client


@pytest.fixture
def api(http, settings):
    return FileAPIClient(http, transfer_timeout=settings.transfer_timeout)


@pytest.fixture
def notifications(settings):
    return NotificationChannel(
        settings.notification_display_seconds, settings.notification_exit_seconds
    )


@pytest.fixture
def manager(api, notifications, settings):
    return FileManager(api, notifications, settings=settings)
