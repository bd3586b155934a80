from fastapi.testclient import TestClient

from app.core.settings import Settings
from app.main import create_app
from app.services.chat_handler import CORS_HEADERS, ChatHandler


class _FakeInferenceService:
    def __init__(self):
        self.calls = []

    def invoke(self, payload):
        self.calls.append(payload)
        return {"content": [{"type": "text", "text": f"echo:{payload.messages[0].content}"}]}


class _FailingInferenceService:
    def invoke(self, payload):
        raise RuntimeError("AccessDeniedException: not authorized")


def _client(service):
    app = create_app()

    import app.api.chat as chat_api

    handler = ChatHandler(inference_service=service, settings=Settings())
    app.dependency_overrides[chat_api.get_chat_handler] = lambda: handler
    return TestClient(app)


def _assert_cors(r):
    for name, value in CORS_HEADERS.items():
        assert r.headers[name] == value


def test_chat_happy_path():
    service = _FakeInferenceService()
    r = _client(service).post("/chat", json={"message": "hi"})

    assert r.status_code == 200
    assert r.json() == {"reply": "echo:hi"}
    assert len(service.calls) == 1
    _assert_cors(r)


def test_chat_preflight_skips_inference():
    service = _FakeInferenceService()
    r = _client(service).options("/chat")

    assert r.status_code == 200
    assert r.content == b""
    assert service.calls == []
    _assert_cors(r)


def test_chat_invalid_json():
    r = _client(_FakeInferenceService()).post(
        "/chat", content="{not json", headers={"Content-Type": "application/json"}
    )

    assert r.status_code == 400
    assert r.json() == {"error": "Invalid JSON in request body"}
    _assert_cors(r)


def test_chat_missing_message():
    r = _client(_FakeInferenceService()).post("/chat", json={})

    assert r.status_code == 400
    assert r.json() == {"error": "Message is required"}
    _assert_cors(r)


def test_chat_upstream_failure():
    r = _client(_FailingInferenceService()).post("/chat", json={"message": "hi"})

    assert r.status_code == 500
    body = r.json()
    assert body["error"] == "Internal server error"
    assert body["details"] == "AccessDeniedException: not authorized"
    _assert_cors(r)


def test_chat_unconfigured_provider_keeps_cors(monkeypatch):
    import app.dependencies as dependencies

    settings = Settings(INFERENCE_PROVIDER="gemini", gemini_api_key=None)
    monkeypatch.setattr(dependencies, "get_settings", lambda: settings)
    dependencies.get_inference_service.cache_clear()
    dependencies.get_chat_handler.cache_clear()

    try:
        client = TestClient(create_app())
        preflight = client.options("/chat")
        r = client.post("/chat", json={"message": "hi"})
    finally:
        dependencies.get_inference_service.cache_clear()
        dependencies.get_chat_handler.cache_clear()

    assert preflight.status_code == 200
    _assert_cors(preflight)
    assert r.status_code == 500
    assert r.json()["details"] == "GEMINI_API_KEY is not configured"
    _assert_cors(r)
