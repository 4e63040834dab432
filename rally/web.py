"""
R-Ally dashboard: a Flask chat front-end for a local Ollama server.

- Chat tab with markdown/code rendering and copy buttons
- Settings tab for model selection, system prompt and context files
- One in-memory ChatSession per browser session

Run: rally  (or python -m rally.web)
"""

import shutil
import uuid
from pathlib import Path
from typing import Dict, List, Optional

from flask import (
    Flask,
    flash,
    redirect,
    render_template_string,
    request,
    session,
    url_for,
)

from .chat_log import Role, Turn
from .config import (
    APP_TITLE,
    DEFAULT_PROMPT_FILE,
    FLASK_SECRET_KEY,
    MODEL_PREFERENCE_FILE,
    SAMPLE_CONTEXT_FILES,
    SERVER_DEBUG,
    SERVER_HOST,
    SERVER_PORT,
    SESSION_ID_KEY,
    UPLOAD_DIR,
)
from .context import load_sample_context
from .ollama import ConnectionStatus, OllamaClient
from .preferences import ModelPreferenceStore
from .prompt import SystemPromptLoader
from .render import render_reply, render_user_message
from .session import NO_MODEL_MESSAGE, ChatSession, NoModelSelected, SessionManager
from .templates import ABOUT_TEMPLATE, CHAT_TEMPLATE, SETTINGS_TEMPLATE

# === Flask App Setup =======================================================

app = Flask(__name__)
app.config["SECRET_KEY"] = FLASK_SECRET_KEY
app.config["UPLOAD_DIR"] = UPLOAD_DIR

ollama_client = OllamaClient()
preferences = ModelPreferenceStore(MODEL_PREFERENCE_FILE)
system_prompts = SystemPromptLoader(DEFAULT_PROMPT_FILE)

# last Test Connection result per browser session
_connection_status: Dict[str, ConnectionStatus] = {}


def _forget_session(session_id: str) -> None:
    """Release the per-session state kept outside the ChatSession."""
    _connection_status.pop(session_id, None)
    upload_dir = Path(app.config["UPLOAD_DIR"]) / session_id
    if upload_dir.is_dir():
        shutil.rmtree(upload_dir, ignore_errors=True)
        print(f"[session] Removed uploads for session {session_id}")


sessions = SessionManager(on_drop=_forget_session)


# === Helpers: session ======================================================


def _session_id() -> str:
    session_id = session.get(SESSION_ID_KEY)
    if session_id is None:
        session_id = uuid.uuid4().hex
        session[SESSION_ID_KEY] = session_id
    return session_id


def _new_chat_session() -> ChatSession:
    return ChatSession(
        client=ollama_client,
        preferences=preferences,
        system_prompt=system_prompts.get_prompt(),
        context_files=load_sample_context(SAMPLE_CONTEXT_FILES),
    )


def current_chat() -> ChatSession:
    return sessions.get_or_create(_session_id(), _new_chat_session)


def _transcript(turns: List[Turn]) -> List[Dict[str, str]]:
    items = []
    for turn in turns:
        if turn.role is Role.USER:
            items.append({"role": "user", "html": render_user_message(turn.content)})
        else:
            items.append({"role": "assistant", "html": render_reply(turn.content)})
    return items


def _save_upload(storage) -> Optional[Path]:
    """Store an uploaded file under a random name that keeps its extension."""
    if storage is None or not storage.filename:
        return None
    upload_dir = Path(app.config["UPLOAD_DIR"]) / _session_id()
    upload_dir.mkdir(parents=True, exist_ok=True)
    target = upload_dir / f"{uuid.uuid4().hex}{Path(storage.filename).suffix.lower()}"
    storage.save(str(target))
    return target


# === Routes: chat ==========================================================


@app.route("/")
def index():
    return redirect(url_for("chat"))


@app.route("/chat", methods=["GET"])
def chat():
    chat_session = current_chat()
    return render_template_string(
        CHAT_TEMPLATE,
        title=f"Chat · {APP_TITLE}",
        active="chat",
        model=chat_session.model,
        transcript=_transcript(list(chat_session.log)),
        no_model_message=NO_MODEL_MESSAGE,
    )


@app.route("/chat/send", methods=["POST"])
def send_message():
    chat_session = current_chat()
    message = request.form.get("message") or ""
    try:
        chat_session.send(message)
    except NoModelSelected as exc:
        flash(str(exc), "warning")
        return redirect(url_for("settings"))
    return redirect(url_for("chat"))


# === Routes: settings ======================================================


@app.route("/settings", methods=["GET"])
def settings():
    chat_session = current_chat()
    status = _connection_status.get(_session_id())
    models = status.models if status is not None else ollama_client.list_models()
    if chat_session.model and chat_session.model not in models:
        models = [chat_session.model, *models]
    return render_template_string(
        SETTINGS_TEMPLATE,
        title=f"Settings · {APP_TITLE}",
        active="settings",
        model=chat_session.model,
        models=models,
        system_prompt=chat_session.system_prompt,
        context_files=chat_session.context_files.names(),
        status=status,
    )


@app.route("/settings/model", methods=["POST"])
def select_model():
    chat_session = current_chat()
    model = (request.form.get("model") or "").strip()
    if model != chat_session.model:
        chat_session.select_model(model)
    if not model:
        flash(NO_MODEL_MESSAGE, "warning")
        return redirect(url_for("settings"))
    return redirect(url_for("chat"))


@app.route("/settings/prompt", methods=["POST"])
def save_prompt():
    chat_session = current_chat()
    text = request.form.get("system_prompt") or ""
    # an emptied prompt falls back to the default, as on first load
    chat_session.set_system_prompt(text if text.strip() else system_prompts.get_prompt())
    flash("System prompt updated.", "info")
    return redirect(url_for("settings"))


@app.route("/settings/prompt-file", methods=["POST"])
def load_prompt():
    chat_session = current_chat()
    path = _save_upload(request.files.get("prompt_file"))
    if path is None:
        flash("Choose a prompt file first.", "warning")
    elif chat_session.load_system_prompt_file(path):
        flash("System prompt loaded successfully!", "info")
    else:
        flash("Could not read file. Please check the file format.", "error")
    return redirect(url_for("settings"))


@app.route("/settings/context", methods=["POST"])
def add_context():
    chat_session = current_chat()
    added = 0
    for storage in request.files.getlist("context_files"):
        path = _save_upload(storage)
        if path is None:
            continue
        chat_session.add_context_file(Path(storage.filename).name, path)
        added += 1
    if added:
        print(f"[context] Added {added} file(s) to session {_session_id()}")
    return redirect(url_for("settings"))


@app.route("/settings/context/remove", methods=["POST"])
def remove_context():
    chat_session = current_chat()
    name = request.form.get("name") or ""
    chat_session.remove_context_file(name)
    return redirect(url_for("settings"))


@app.route("/settings/test-connection", methods=["POST"])
def test_connection():
    chat_session = current_chat()
    _connection_status[_session_id()] = chat_session.refresh_models()
    return redirect(url_for("settings"))


# === Routes: about =========================================================


@app.route("/about")
def about():
    return render_template_string(
        ABOUT_TEMPLATE,
        title=f"About · {APP_TITLE}",
        active="about",
        model=current_chat().model,
    )


# === Main Entry Point ======================================================


def main() -> None:
    print(
        f"[startup] Starting {APP_TITLE} on http://{SERVER_HOST}:{SERVER_PORT} "
        f"(Ollama: {ollama_client.base_url})"
    )
    app.run(host=SERVER_HOST, port=SERVER_PORT, debug=SERVER_DEBUG)


if __name__ == "__main__":
    main()
