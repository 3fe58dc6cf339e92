import json

from sources.session import Session, load_session


def test_missing_file_is_anonymous_live_session(tmp_path, monkeypatch):
    monkeypatch.delenv("SHEM_DEMO_MODE", raising=False)

    session = load_session(tmp_path / "nope.json")

    assert session == Session()
    assert not session.is_demo


def test_demo_user_marks_demo_session(tmp_path, monkeypatch):
    monkeypatch.delenv("SHEM_DEMO_MODE", raising=False)
    path = tmp_path / "session.json"
    path.write_text(json.dumps({"demoUser": "guest"}))

    session = load_session(path)

    assert session.is_demo
    assert session.demo_user == "guest"


def test_token_is_read(tmp_path, monkeypatch):
    monkeypatch.delenv("SHEM_DEMO_MODE", raising=False)
    path = tmp_path / "session.json"
    path.write_text(json.dumps({"token": "abc123"}))

    session = load_session(path)

    assert session.token == "abc123"
    assert not session.is_demo


def test_env_forces_demo_mode(tmp_path, monkeypatch):
    monkeypatch.setenv("SHEM_DEMO_MODE", "1")

    session = load_session(tmp_path / "nope.json")

    assert session.is_demo


def test_session_file_from_env(tmp_path, monkeypatch):
    monkeypatch.delenv("SHEM_DEMO_MODE", raising=False)
    path = tmp_path / "custom.json"
    path.write_text(json.dumps({"token": "t"}))
    monkeypatch.setenv("SHEM_SESSION_FILE", str(path))

    assert load_session().token == "t"


def test_corrupt_file_is_ignored(tmp_path, monkeypatch):
    monkeypatch.delenv("SHEM_DEMO_MODE", raising=False)
    path = tmp_path / "session.json"
    path.write_text("{broken")

    assert load_session(path) == Session()
