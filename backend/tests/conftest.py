import os
import socket
import tempfile
import threading
import time
from pathlib import Path

# Keep the import-time engine and media dir away from the working tree
_SCRATCH = Path(tempfile.mkdtemp(prefix="reelbox-tests-"))
os.environ.setdefault("DATABASE_URL", f"sqlite:///{_SCRATCH / 'default.sqlite'}")
os.environ.setdefault("MEDIA_DIR", str(_SCRATCH / "media"))
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
import uvicorn
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from reelbox.core.config import settings
from reelbox.db.session import Base, get_db, make_engine
from reelbox.lib.storage import LocalStorage, get_storage
from reelbox.main import app


@pytest.fixture()
def session_factory(tmp_path: Path):
    engine = make_engine(f"sqlite:///{tmp_path / 'test.sqlite'}")
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)
    yield factory
    engine.dispose()


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def storage(tmp_path: Path) -> LocalStorage:
    return LocalStorage(tmp_path / "media", "http://testserver")


@pytest.fixture()
def client(session_factory, storage):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage] = lambda: storage
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


def _free_port() -> int:
    with socket.socket() as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


@pytest.fixture()
def live_server(session_factory):
    """The real app served by uvicorn on a loopback port; yields its base url."""
    port = _free_port()
    base_url = f"http://127.0.0.1:{port}"
    # the /media mount serves settings.media_dir, so write there
    storage = LocalStorage(settings.media_dir, base_url)

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage] = lambda: storage

    server = uvicorn.Server(uvicorn.Config(app, host="127.0.0.1", port=port, log_level="warning"))
    thread = threading.Thread(target=server.run, daemon=True)
    thread.start()
    deadline = time.monotonic() + 10
    while not server.started:
        if not thread.is_alive() or time.monotonic() > deadline:
            app.dependency_overrides.clear()
            raise RuntimeError(f"uvicorn did not start on port {port}")
        time.sleep(0.05)
    try:
        yield base_url
    finally:
        server.should_exit = True
        thread.join(timeout=10)
        app.dependency_overrides.clear()
