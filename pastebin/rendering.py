import html

HOME_PAGE = """<!DOCTYPE html>
<html>
<head>
  <title>Pastebin Lite</title>
  <meta charset="utf-8" />
  <style>
    body {
      font-family: Arial, sans-serif;
      background: #f5f6fa;
      display: flex;
      justify-content: center;
      align-items: center;
      height: 100vh;
      margin: 0;
    }
    .box {
      background: #fff;
      padding: 20px;
      width: 420px;
      border-radius: 8px;
      box-shadow: 0 4px 10px rgba(0,0,0,0.1);
    }
    textarea, input, button { width: 80%; margin: 10px; padding: 8px; font-size: 14px; }
    button { background: #4b7bec; color: white; border: none; cursor: pointer; }
    button:hover { background: #3867d6; }
    .error { color: red; margin-top: 10px; }
    .success { color: green; margin-top: 10px; word-break: break-all; }
  </style>
</head>
<body>
  <div class="box">
    <h2>Create Paste</h2>
    <textarea id="content" rows="5" placeholder="Enter text"></textarea>
    <input id="ttl" type="number" min="1" placeholder="TTL (seconds)">
    <input id="views" type="number" min="1" placeholder="Max views">
    <button onclick="createPaste()">Create Paste</button>
    <div id="result"></div>
  </div>
<script>
function escapeHtml(s) {
  return String(s).replace(/&/g, "&amp;").replace(/</g, "&lt;").replace(/>/g, "&gt;");
}

async function createPaste() {
  const result = document.getElementById("result");
  result.innerHTML = "";
  const ttl = document.getElementById("ttl").value;
  const views = document.getElementById("views").value;
  try {
    const res = await fetch("/api/pastes", {
      method: "POST",
      headers: { "Content-Type": "application/json" },
      body: JSON.stringify({
        content: document.getElementById("content").value,
        ttl_seconds: ttl ? Number(ttl) : undefined,
        max_views: views ? Number(views) : undefined
      })
    });
    const data = await res.json();
    if (!res.ok) {
      result.innerHTML = "<div class='error'>" + escapeHtml(data.error) + "</div>";
      return;
    }
    const url = escapeHtml(data.url);
    result.innerHTML = "<div class='success'>Paste created:<br>" +
      "<a href='" + url + "' target='_blank'>" + url + "</a></div>";
  } catch (e) {
    result.innerHTML = "<div class='error'>Server error</div>";
  }
}
</script>
</body>
</html>
"""


def render_home() -> str:
    """Return the create-paste page. The form submits through the JSON API."""

    return HOME_PAGE


def render_paste(content: str) -> str:
    """Wrap paste content in a `<pre>` block, escaping HTML metacharacters."""

    return f"<pre>{html.escape(content, quote=True)}</pre>"
