"""Inline HTML templates for the R-Ally dashboard."""

from .config import APP_TITLE

# === Styles ================================================================

BASE_CSS = """
:root {
  color-scheme: light;
  --bg-page: #f8f9fa;
  --bg-card: #ffffff;
  --bg-sidebar: #343a40;
  --border-subtle: #dee2e6;
  --text-main: #212529;
  --text-muted: #6c757d;
  --accent: #667eea;
  --accent-2: #764ba2;
  --danger: #dc3545;
  --ok: #28a745;
  --radius-card: 10px;
  --shadow-card: 0 2px 10px rgba(0, 0, 0, 0.1);
}
*,
*::before,
*::after {
  box-sizing: border-box;
}
body {
  margin: 0;
  min-height: 100vh;
  font-family: system-ui, -apple-system, BlinkMacSystemFont, "Segoe UI", sans-serif;
  background: var(--bg-page);
  color: var(--text-main);
}
.app-header {
  height: 50px;
  padding: 0 18px;
  display: flex;
  align-items: center;
  justify-content: space-between;
  background: linear-gradient(135deg, var(--accent) 0%, var(--accent-2) 100%);
  color: white;
}
.app-header-title {
  font-size: 18px;
  font-weight: 700;
}
.app-header-sub {
  font-size: 12px;
  opacity: 0.85;
}
.app-body {
  display: flex;
  min-height: calc(100vh - 50px);
}
.sidebar {
  width: 220px;
  background: var(--bg-sidebar);
  padding: 12px 0;
}
.sidebar a {
  display: block;
  padding: 10px 18px;
  color: #c2c7d0;
  text-decoration: none;
  font-size: 14px;
}
.sidebar a.active,
.sidebar a:hover {
  background: rgba(255, 255, 255, 0.08);
  color: white;
}
.sidebar hr {
  border: none;
  border-top: 1px solid rgba(255, 255, 255, 0.1);
  margin: 8px 12px;
}
.content {
  flex: 1;
  padding: 10px;
}
.card {
  background: var(--bg-card);
  border-radius: var(--radius-card);
  box-shadow: var(--shadow-card);
  border: 1px solid var(--border-subtle);
  padding: 20px;
  margin: 10px;
}
.columns {
  display: flex;
  gap: 10px;
  flex-wrap: wrap;
}
.columns > .card {
  flex: 1;
  min-width: 320px;
}
.alert {
  border-radius: 8px;
  padding: 8px 12px;
  margin: 10px;
  font-size: 13px;
}
.alert-warning {
  background: #fff8e1;
  color: #8a6d00;
  border: 1px solid #ffe08a;
}
.alert-error {
  background: #fef2f2;
  color: #991b1b;
  border: 1px solid #fee2e2;
}
.alert-info {
  background: #eef2ff;
  color: #3730a3;
  border: 1px solid #c7d2fe;
}
.chat-container {
  height: calc(100vh - 250px);
  overflow-y: auto;
  padding: 20px;
  background: white;
  border-radius: var(--radius-card);
  margin: 10px;
  box-shadow: var(--shadow-card);
}
.message {
  margin: 15px 0;
  padding: 15px;
  border-radius: 15px;
  max-width: 80%;
  word-wrap: break-word;
  position: relative;
}
.user-message {
  background: linear-gradient(135deg, var(--accent) 0%, var(--accent-2) 100%);
  color: white;
  margin-left: auto;
  text-align: right;
  box-shadow: 0 2px 8px rgba(102, 126, 234, 0.3);
}
.assistant-message {
  background: var(--bg-page);
  border: 1px solid var(--border-subtle);
  margin-right: auto;
  box-shadow: 0 2px 8px rgba(0, 0, 0, 0.1);
}
.assistant-message code {
  font-family: ui-monospace, Menlo, Consolas, "Courier New", monospace;
  background: rgba(102, 126, 234, 0.1);
  padding: 1px 3px;
  border-radius: 4px;
}
.code-block {
  background: #2d3748;
  color: #e2e8f0;
  padding: 15px;
  border-radius: 8px;
  margin: 10px 0;
  position: relative;
  font-family: "Courier New", monospace;
  font-size: 13px;
  line-height: 1.4;
  overflow-x: auto;
}
.code-block code {
  background: none;
  padding: 0;
}
.copy-button {
  position: absolute;
  top: 5px;
  right: 5px;
  background: #4a5568;
  color: white;
  border: none;
  border-radius: 4px;
  padding: 4px 8px;
  font-size: 11px;
  cursor: pointer;
}
.copy-button:hover { background: #2d3748; }
.copy-button.copied { background: #38a169; }
.input-container {
  padding: 20px;
  background: white;
  border-radius: var(--radius-card);
  margin: 10px;
  box-shadow: var(--shadow-card);
  display: flex;
  gap: 12px;
  align-items: flex-start;
}
textarea,
select,
input[type="file"] {
  width: 100%;
  padding: 10px;
  border: 2px solid #e2e8f0;
  border-radius: 8px;
  font-family: inherit;
  font-size: 14px;
}
textarea:focus,
select:focus {
  outline: none;
  border-color: var(--accent);
}
label {
  display: block;
  font-size: 13px;
  font-weight: 600;
  margin: 12px 0 4px;
}
.btn {
  background: linear-gradient(135deg, var(--accent) 0%, var(--accent-2) 100%);
  color: white;
  border: none;
  padding: 12px 24px;
  border-radius: 8px;
  cursor: pointer;
  font-weight: bold;
  margin-top: 10px;
}
.btn-send {
  width: 120px;
  height: 60px;
}
.btn-small {
  background: var(--danger);
  color: white;
  border: none;
  border-radius: 3px;
  padding: 2px 8px;
  font-size: 12px;
  cursor: pointer;
}
.file-item {
  display: flex;
  justify-content: space-between;
  align-items: center;
  margin: 5px 0;
  padding: 5px;
  background: var(--bg-page);
  border-radius: 5px;
}
.muted {
  color: var(--text-muted);
  font-style: italic;
}
.status-ok {
  color: var(--ok);
  font-weight: bold;
}
.status-error {
  color: var(--danger);
  font-weight: bold;
}
.loading {
  display: none;
  text-align: center;
  padding: 20px;
  color: var(--text-muted);
  font-style: italic;
}
.loading.show { display: block; }
"""

# === Shared page chrome ====================================================

_PAGE_OPEN = (
    """
<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>{{ title }}</title>
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <style>"""
    + BASE_CSS
    + f"""</style>
</head>
<body>
  <header class="app-header">
    <div>
      <div class="app-header-title">{APP_TITLE}</div>
      <div class="app-header-sub">Your R programming ally, powered by Ollama</div>
    </div>
    <div class="app-header-sub">
      {{% if model %}}Model: <code>{{{{ model }}}}</code>{{% else %}}No model selected{{% endif %}}
    </div>
  </header>
  <div class="app-body">
    <nav class="sidebar">
      <a href="{{{{ url_for('chat') }}}}" class="{{{{ 'active' if active == 'chat' }}}}">Chat</a>
      <a href="{{{{ url_for('settings') }}}}" class="{{{{ 'active' if active == 'settings' }}}}">Settings</a>
      <hr>
      <a href="{{{{ url_for('about') }}}}" class="{{{{ 'active' if active == 'about' }}}}">About</a>
    </nav>
    <main class="content">
      {{% for category, text in get_flashed_messages(with_categories=true) %}}
      <div class="alert alert-{{{{ category }}}}">{{{{ text }}}}</div>
      {{% endfor %}}
"""
)

_PAGE_CLOSE = """
    </main>
  </div>
</body>
</html>
"""

# === Chat ==================================================================

COPY_SCRIPT = """
<script>
  function copyToClipboard(button) {
    const codeBlock = button.nextElementSibling;
    const text = codeBlock.textContent;

    function markCopied() {
      button.textContent = "Copied!";
      button.classList.add("copied");
      setTimeout(function () {
        button.textContent = "Copy";
        button.classList.remove("copied");
      }, 2000);
    }

    if (navigator.clipboard && window.isSecureContext) {
      navigator.clipboard.writeText(text).then(markCopied);
      return;
    }
    const textArea = document.createElement("textarea");
    textArea.value = text;
    document.body.appendChild(textArea);
    textArea.select();
    try {
      document.execCommand("copy");
      markCopied();
    } catch (err) {
      console.error("Copy failed:", err);
    }
    document.body.removeChild(textArea);
  }
</script>
"""

CHAT_TEMPLATE = (
    _PAGE_OPEN
    + """
      {% if not model %}
      <div class="alert alert-warning">{{ no_model_message }}</div>
      {% endif %}
      <div class="chat-container" id="chat_container">
        {% for item in transcript %}
        <div class="message {{ item.role }}-message">{{ item.html|safe }}</div>
        {% endfor %}
      </div>
      <div class="loading" id="loading">R-Ally is thinking...</div>
      <form class="input-container" id="chat_form" method="post" action="{{ url_for('send_message') }}">
        <textarea id="message" name="message" rows="2"
                  placeholder="Ask me anything about R programming..."></textarea>
        <button class="btn btn-send" id="send" type="submit">Send</button>
      </form>
"""
    + COPY_SCRIPT
    + """
<script>
  (function () {
    const container = document.getElementById("chat_container");
    if (container) {
      container.scrollTop = container.scrollHeight;
    }
    const form = document.getElementById("chat_form");
    const input = document.getElementById("message");
    form.addEventListener("submit", function () {
      document.getElementById("loading").classList.add("show");
    });
    // Enter sends, Shift+Enter inserts a newline
    input.addEventListener("keydown", function (e) {
      if (e.key === "Enter" && !e.shiftKey) {
        e.preventDefault();
        if (input.value.trim()) {
          document.getElementById("loading").classList.add("show");
          form.submit();
        }
      }
    });
  })();
</script>
"""
    + _PAGE_CLOSE
)

# === Settings ==============================================================

SETTINGS_TEMPLATE = (
    _PAGE_OPEN
    + """
      <div class="columns">
        <section class="card">
          <h3>Ollama Settings</h3>
          <form method="post" action="{{ url_for('select_model') }}">
            <label for="model">Model:</label>
            <select id="model" name="model" onchange="this.form.submit()">
              <option value="" {{ 'selected' if not model }}>Please select a model...</option>
              {% for name in models %}
              <option value="{{ name }}" {{ 'selected' if name == model }}>{{ name }}</option>
              {% endfor %}
            </select>
          </form>
          <form method="post" action="{{ url_for('save_prompt') }}">
            <label for="system_prompt">System Prompt:</label>
            <textarea id="system_prompt" name="system_prompt" rows="8">{{ system_prompt }}</textarea>
            <button class="btn" type="submit">Save Prompt</button>
          </form>
          <form method="post" action="{{ url_for('load_prompt') }}" enctype="multipart/form-data">
            <label for="prompt_file">Load System Prompt from File:</label>
            <input id="prompt_file" name="prompt_file" type="file" accept=".txt,.md,.r">
            <button class="btn" type="submit">Load Prompt</button>
          </form>
        </section>
        <section class="card">
          <h3>Status</h3>
          {% if status is none %}
          <div class="status-ok">Ready! Click 'Test Connection' to check Ollama status</div>
          {% elif status.error %}
          <div class="status-error">Connection failed: {{ status.error }}</div>
          {% elif not status.models %}
          <div class="status-error">No models found. Install models with: ollama pull llama3.2:1b</div>
          {% else %}
          <div class="status-ok">Connected to Ollama</div>
          <div><strong>Available models:</strong></div>
          <ul>
            {% for name in status.models %}<li>{{ name }}</li>{% endfor %}
          </ul>
          <div class="muted">Click 'Test Connection' to refresh</div>
          {% endif %}

          <h4>Context Files</h4>
          <form method="post" action="{{ url_for('add_context') }}" enctype="multipart/form-data">
            <label for="context_files">Add Context Files:</label>
            <input id="context_files" name="context_files" type="file" multiple
                   accept=".r,.rmd,.md,.csv,.txt">
            <button class="btn" type="submit">Upload</button>
          </form>
          {% if context_files %}
          <div style="margin-top: 10px;">
            <strong>Context files:</strong>
            {% for name in context_files %}
            <form class="file-item" method="post" action="{{ url_for('remove_context') }}">
              <span>{{ name }}</span>
              <input type="hidden" name="name" value="{{ name }}">
              <button class="btn-small" type="submit">Remove</button>
            </form>
            {% endfor %}
          </div>
          {% else %}
          <p class="muted">No context files added</p>
          {% endif %}

          <form method="post" action="{{ url_for('test_connection') }}">
            <button class="btn" type="submit" style="width: 100%;">Test Connection</button>
          </form>
        </section>
      </div>
"""
    + _PAGE_CLOSE
)

# === About =================================================================

ABOUT_TEMPLATE = (
    _PAGE_OPEN
    + f"""
      <section class="card">
        <h2>{APP_TITLE}</h2>
        <p>An intelligent R programming assistant powered by Ollama.</p>
        <hr>
        <h4>Features:</h4>
        <ul>
          <li>Interactive chat interface</li>
          <li>Custom system prompts</li>
          <li>File context integration</li>
          <li>Markdown rendering</li>
          <li>Copy-to-clipboard functionality</li>
        </ul>
        <hr>
        <h4>Usage:</h4>
        <p>1. Select your preferred model in Settings</p>
        <p>2. Customize the system prompt or load from file</p>
        <p>3. Add context files for better responses</p>
        <p>4. Start chatting in the Chat tab</p>
        <hr>
        <p class="muted">Built with Flask and Ollama</p>
      </section>
"""
    + _PAGE_CLOSE
)
