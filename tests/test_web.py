"""Tests for the Flask dashboard routes."""
import io

import pytest

from rally import web
from rally.preferences import InMemoryPreferenceStore
from rally.session import GREETING_WITH_MODEL, NO_MODEL_MESSAGE, SessionManager


@pytest.fixture
def app_env(monkeypatch, tmp_path, fake_client):
    """Point the app at fakes and a scratch directory."""
    monkeypatch.chdir(tmp_path)
    prefs = InMemoryPreferenceStore()
    monkeypatch.setattr(web, "ollama_client", fake_client)
    monkeypatch.setattr(web, "preferences", prefs)
    monkeypatch.setattr(web, "sessions", SessionManager())
    monkeypatch.setattr(web, "_connection_status", {})
    monkeypatch.setitem(web.app.config, "UPLOAD_DIR", tmp_path / "uploads")
    monkeypatch.setitem(web.app.config, "TESTING", True)
    return {"client": fake_client, "prefs": prefs}


@pytest.fixture
def http(app_env):
    return web.app.test_client()


def select(http, model):
    return http.post("/settings/model", data={"model": model})


class TestChatRoutes:
    def test_index_redirects_to_chat(self, http):
        response = http.get("/")
        assert response.status_code == 302
        assert response.headers["Location"].endswith("/chat")

    def test_chat_without_model_warns(self, http):
        body = http.get("/chat").get_data(as_text=True)
        assert NO_MODEL_MESSAGE in body
        assert "Welcome to R-Ally!" in body
        assert "<strong>Start Ollama</strong>" in body

    def test_send_without_model_redirects_to_settings(self, http, app_env):
        response = http.post("/chat/send", data={"message": "hi"})
        assert response.status_code == 302
        assert response.headers["Location"].endswith("/settings")
        assert app_env["client"].calls == []
        settings_page = http.get("/settings").get_data(as_text=True)
        assert NO_MODEL_MESSAGE in settings_page

    def test_send_renders_reply(self, http, app_env):
        app_env["client"].reply = "Try:\n```r\nx <- read.csv('a.csv')\n```"
        select(http, "llama3.2:1b")
        response = http.post("/chat/send", data={"message": "read <csv>"})
        assert response.status_code == 302

        body = http.get("/chat").get_data(as_text=True)
        assert "read &lt;csv&gt;" in body
        assert 'class="language-r"' in body
        assert "x &lt;- read.csv('a.csv')" in body
        assert "copyToClipboard" in body

    def test_sessions_do_not_share_logs(self, app_env):
        first = web.app.test_client()
        second = web.app.test_client()
        select(first, "llama3.2:1b")
        select(second, "llama3.2:1b")
        first.post("/chat/send", data={"message": "private question"})
        assert "private question" in first.get("/chat").get_data(as_text=True)
        assert "private question" not in second.get("/chat").get_data(as_text=True)


class TestSettingsRoutes:
    def test_settings_lists_models(self, http):
        body = http.get("/settings").get_data(as_text=True)
        assert "llama3.2:1b" in body
        assert "phi4:latest" in body
        assert "No context files added" in body

    def test_select_model_resets_chat_and_saves(self, http, app_env):
        response = select(http, "phi4:latest")
        assert response.headers["Location"].endswith("/chat")
        assert app_env["prefs"].load() == "phi4:latest"
        body = http.get("/chat").get_data(as_text=True)
        assert GREETING_WITH_MODEL.split(".")[0] in body

    def test_upload_and_remove_context_file(self, http, app_env):
        select(http, "llama3.2:1b")
        http.post(
            "/settings/context",
            data={"context_files": [(io.BytesIO(b"library(dplyr)\n"), "helpers.R")]},
            content_type="multipart/form-data",
        )
        assert "helpers.R" in http.get("/settings").get_data(as_text=True)

        http.post("/chat/send", data={"message": "use my helpers"})
        system = app_env["client"].calls[-1]["messages"][0]["content"]
        assert "library(dplyr)" in system

        http.post("/settings/context/remove", data={"name": "helpers.R"})
        assert "No context files added" in http.get("/settings").get_data(as_text=True)

    def test_load_prompt_file(self, http, app_env):
        select(http, "llama3.2:1b")
        response = http.post(
            "/settings/prompt-file",
            data={"prompt_file": (io.BytesIO(b"Only answer with code."), "style.md")},
            content_type="multipart/form-data",
        )
        assert response.status_code == 302
        body = http.get("/settings").get_data(as_text=True)
        assert "System prompt loaded successfully!" in body
        assert "Only answer with code." in body

    def test_load_unsupported_prompt_file(self, http):
        http.post(
            "/settings/prompt-file",
            data={"prompt_file": (io.BytesIO(b"\x00\x01"), "prompt.docx")},
            content_type="multipart/form-data",
        )
        body = http.get("/settings").get_data(as_text=True)
        assert "Could not read file. Please check the file format." in body

    def test_save_prompt_text(self, http, app_env):
        select(http, "llama3.2:1b")
        http.post("/settings/prompt", data={"system_prompt": "Be terse."})
        http.post("/chat/send", data={"message": "hi"})
        assert app_env["client"].calls[-1]["messages"][0]["content"] == "Be terse."

    def test_test_connection_shows_models(self, http):
        http.post("/settings/test-connection")
        body = http.get("/settings").get_data(as_text=True)
        assert "Connected to Ollama" in body

    def test_test_connection_failure(self, http, app_env):
        app_env["client"].connected = False
        http.post("/settings/test-connection")
        body = http.get("/settings").get_data(as_text=True)
        assert "Connection failed: connection refused" in body


class TestSessionExpiry:
    def test_idle_session_releases_status_and_uploads(self, app_env, monkeypatch, tmp_path):
        now = [1000.0]
        manager = SessionManager(timeout_seconds=60, on_drop=web._forget_session, clock=lambda: now[0])
        monkeypatch.setattr(web, "sessions", manager)

        idle = web.app.test_client()
        idle.post(
            "/settings/context",
            data={"context_files": [(io.BytesIO(b"x <- 1\n"), "helpers.R")]},
            content_type="multipart/form-data",
        )
        idle.post("/settings/test-connection")
        (session_id,) = list(web._connection_status)
        upload_dir = tmp_path / "uploads" / session_id
        assert upload_dir.is_dir()

        now[0] += 120
        web.app.test_client().get("/chat")

        assert session_id not in web._connection_status
        assert not upload_dir.exists()
        assert len(manager) == 1
        assert "helpers.R" not in idle.get("/settings").get_data(as_text=True)


class TestAbout:
    def test_about_page(self, http):
        body = http.get("/about").get_data(as_text=True)
        assert "An intelligent R programming assistant powered by Ollama." in body
