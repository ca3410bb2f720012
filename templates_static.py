"""Templates and static file generation."""

from pathlib import Path

# Template content
BASE_HTML = """<!doctype html>
<html>
<head>
  <meta charset="utf-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1" />
  <title>{{ title or 'Tag Vault' }}</title>
  <link rel="stylesheet" href="/static/app.css">
</head>
<body>
  <header class="topbar">
    <nav>
      <a href="/" class="brand">Tag Vault</a>
      <a href="/images-html">All images</a>
      <a href="/image-count">Count</a>
      <form class="search" method="post" action="/search">
        <input name="tags" value="{{ q or '' }}" placeholder="Search tags…" />
        <button>Search</button>
      </form>
    </nav>
  </header>
  <main class="container">
    {% block content %}{% endblock %}
  </main>
</body>
</html>
"""

INDEX_HTML = """{% extends 'base.html' %}
{% block content %}
<h1>Upload</h1>
<form class="upload" method="post" action="/upload" enctype="multipart/form-data">
  <input name="tags" placeholder="Tags, e.g. cat,orange" />
  <input type="file" name="image" accept="image/*" />
  <button>Upload</button>
</form>
<p class="muted">{{ count }} images in the database</p>
{% endblock %}
"""

# Fragment for one record; rendered alone after upload and in lists
THUMBNAIL_HTML = """<article class="card">
  <a href="/image/{{ image.id }}" title="Download original">
    <img loading="lazy" src="/thumb/{{ image.id }}" alt="{{ image.tags }}" />
  </a>
  <div class="meta">
    <span class="muted">#{{ image.id }}</span>
    <div class="tags">{{ image.tags }}</div>
  </div>
</article>
"""

GALLERY_HTML = """<div class="grid">
{% for image in images %}{% include 'thumbnail.html' %}{% else %}<p class="muted">No images.</p>{% endfor %}
</div>
"""

APP_CSS = """:root{--bg:#0f1115;--fg:#e5e7eb;--muted:#a1a1aa;--card:#111318;--brand:#7aa2ff}
*{box-sizing:border-box}body{margin:0;background:var(--bg);color:var(--fg);font:15px/1.45 system-ui,-apple-system,Segoe UI,Roboto,Inter,Ubuntu,Helvetica,Arial}
a{color:var(--brand);text-decoration:none}.muted{color:var(--muted)}
.topbar{position:sticky;top:0;background:#0c0e13;border-bottom:1px solid #1c1f26;z-index:10}
.topbar nav{margin:auto;display:flex;gap:14px;align-items:center;padding:10px}
.topbar .brand{font-weight:700}
.topbar .search{margin-left:auto;display:flex;gap:6px}
.container{margin:20px auto;padding:0 14px}
.upload{display:grid;gap:10px;max-width:520px}
.grid{display:grid;grid-template-columns:repeat(auto-fill,minmax(140px,1fr));gap:14px}
.card{background:var(--card);border:1px solid #1f2430;border-radius:12px;overflow:hidden;display:flex;flex-direction:column}
.card img{width:100%;height:120px;object-fit:contain;display:block;background:#090a0d}
.card .meta{padding:8px;display:flex;flex-direction:column;gap:4px}
.tags{white-space:nowrap;overflow:hidden;text-overflow:ellipsis}
button{cursor:pointer;background:#1e2635;border:1px solid #2f3748;color:var(--fg);padding:6px 12px;border-radius:8px}
input{background:#0e1218;border:1px solid #232a39;color:var(--fg);padding:6px 10px;border-radius:8px;width:100%}
"""


def ensure_assets(templates_dir: Path, static_dir: Path) -> None:
    """Write templates/static files that do not exist yet."""
    templates_dir = Path(templates_dir)
    static_dir = Path(static_dir)
    templates_dir.mkdir(parents=True, exist_ok=True)
    static_dir.mkdir(parents=True, exist_ok=True)
    files = {
        templates_dir / "base.html": BASE_HTML,
        templates_dir / "index.html": INDEX_HTML,
        templates_dir / "thumbnail.html": THUMBNAIL_HTML,
        templates_dir / "gallery.html": GALLERY_HTML,
        static_dir / "app.css": APP_CSS,
    }
    for p, content in files.items():
        if not p.exists():
            p.write_text(content, encoding="utf-8")
