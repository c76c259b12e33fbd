import pytest
from fastapi.testclient import TestClient
from sqlalchemy import inspect
from sqlalchemy.exc import OperationalError

from app import main
from app.database import Base, engine


def test_home_endpoint(client):
    response = client.get("/")

    assert response.status_code == 200
    assert response.json() == {"message": "Product API running"}


def test_unknown_route_uses_message_body(client):
    response = client.get("/api/unknown")

    assert response.status_code == 404
    assert response.json() == {"message": "Not Found"}


def test_startup_builds_media_service(client):
    media_service = main.app.state.media_service

    assert media_service.cloud_name == "demo"
    assert media_service.folder == "jaggery-products"


def test_startup_creates_tables(client):
    Base.metadata.drop_all(bind=engine)

    with TestClient(main.app):
        pass

    assert "products" in inspect(engine).get_table_names()


def test_run_exits_when_database_unreachable(monkeypatch):
    served = []

    def _unreachable():
        raise OperationalError("SELECT 1", {}, Exception("unable to open database file"))

    monkeypatch.setattr(main, "setup_logging", lambda: None)
    monkeypatch.setattr(main, "verify_connection", _unreachable)
    monkeypatch.setattr(main.uvicorn, "run", lambda *args, **kwargs: served.append(kwargs))

    with pytest.raises(SystemExit) as exc_info:
        main.run()

    assert exc_info.value.code == 1
    assert served == []


def test_run_serves_after_database_check(monkeypatch):
    served = []

    monkeypatch.setattr(main, "setup_logging", lambda: None)
    monkeypatch.setattr(main, "verify_connection", lambda: None)
    monkeypatch.setattr(main.uvicorn, "run", lambda app, **kwargs: served.append((app, kwargs)))

    main.run()

    assert len(served) == 1
    app, kwargs = served[0]
    assert app is main.app
    assert kwargs["port"] == main.settings.PORT
