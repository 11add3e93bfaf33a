"""Jinja templates rendered by the web layer."""

BASE = """<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1">
  <title>{{ title }}</title>
  <link rel="stylesheet" href="https://cdn.jsdelivr.net/npm/bootstrap@5.3.3/dist/css/bootstrap.min.css">
</head>
<body class="bg-light">
  <div class="container py-4">
    {{ body|safe }}
    {% if package_info.version %}
      <p class="text-muted small mt-4">{{ package_info.name }} {{ package_info.version }}</p>
    {% endif %}
  </div>
</body>
</html>
"""

LOGIN = """
<div class="mx-auto bg-white p-4 rounded shadow-sm" style="max-width: 400px; margin-top: 80px;">
  <h3 class="mb-4 text-center">Login to S3 File Manager</h3>
  {% if error %}<div class="alert alert-danger text-center">{{ error }}</div>{% endif %}
  <form method="post" action="{{ url_for('login') }}">
    <div class="mb-3">
      <label for="username" class="form-label">Username</label>
      <input type="text" class="form-control" id="username" name="username" required autofocus>
    </div>
    <div class="mb-3">
      <label for="password" class="form-label">Password</label>
      <input type="password" class="form-control" id="password" name="password" required>
    </div>
    <button type="submit" class="btn btn-primary w-100">Login</button>
  </form>
</div>
"""

CONFIG_ERROR = """
<div class="alert alert-danger" role="alert">
  <strong>Configuration Error:</strong> the file manager cannot reach its bucket yet.
  <ul class="mb-0 mt-2">
    {% for problem in problems %}<li>{{ problem }}</li>{% endfor %}
  </ul>
</div>
"""

INDEX = """
<div class="d-flex justify-content-between align-items-center mb-3">
  <h1 class="mb-0">S3 File Manager</h1>
  <a class="btn btn-outline-secondary btn-sm" href="{{ url_for('logout') }}">Logout</a>
</div>
{% if result.message %}<div class="alert alert-success">{{ result.message }}</div>{% endif %}
{% if result.error %}<div class="alert alert-danger">{{ result.error }}</div>{% endif %}

<div class="mb-3">
  <strong>Bucket:</strong> {{ bucket }}<br>
  <nav aria-label="breadcrumb">
    <ol class="breadcrumb mb-0">
      {% for crumb in breadcrumbs %}
        <li class="breadcrumb-item{% if loop.last %} active{% endif %}">
          {% if loop.last %}{{ crumb.name }}{% else %}<a href="{{ url_for('index', prefix=crumb.prefix) }}">{{ crumb.name }}</a>{% endif %}
        </li>
      {% endfor %}
    </ol>
  </nav>
  <span class="text-muted small">
    {{ listing.folders|length }} folder(s), {{ listing.files|length }} file(s), {{ format_size(listing.total_size) }}
  </span>
</div>

<div class="d-flex gap-2 mb-4">
  {% if prefix %}
    <a href="{{ url_for('index', prefix=parent) }}" class="btn btn-secondary">Back</a>
  {% endif %}
  {% if result.clipboard %}
    <form method="post" action="{{ url_for('index', prefix=prefix) }}" class="ms-auto">
      <input type="hidden" name="action" value="paste">
      <span class="text-muted small me-2">{{ result.clipboard.action.value|capitalize }}: {{ result.clipboard.key }}</span>
      <button type="submit" class="btn btn-warning">Paste here</button>
    </form>
  {% endif %}
</div>

<div class="row mb-4">
  <div class="col-md-6">
    <h5>Create Folder</h5>
    <form method="post" action="{{ url_for('index', prefix=prefix) }}" class="d-flex">
      <input type="hidden" name="action" value="create_folder">
      <input type="text" name="folder_name" class="form-control me-2" placeholder="Folder name" required>
      <button type="submit" class="btn btn-primary">Create</button>
    </form>
  </div>
  <div class="col-md-6">
    <h5>Upload File</h5>
    <form method="post" action="{{ url_for('index', prefix=prefix) }}" enctype="multipart/form-data" class="d-flex">
      <input type="hidden" name="action" value="upload">
      <input type="file" name="file" class="form-control me-2" required>
      <button type="submit" class="btn btn-success">Upload</button>
    </form>
  </div>
</div>

<h4>Folders</h4>
{% if not listing.folders %}
  <p class="text-muted">No subfolders</p>
{% else %}
  <ul class="list-group mb-4">
    {% for folder in listing.folders %}
      <li class="list-group-item">
        <div class="d-flex justify-content-between align-items-center">
          <a href="{{ url_for('index', prefix=folder.prefix) }}">{{ display_name(folder.prefix, prefix) }}/</a>
          <div class="d-flex gap-1">
            <a href="{{ url_for('index', prefix=prefix, clipboard_action='copy', clipboard_key=folder.prefix) }}" class="btn btn-sm btn-outline-primary">Copy</a>
            <a href="{{ url_for('index', prefix=prefix, clipboard_action='cut', clipboard_key=folder.prefix) }}" class="btn btn-sm btn-outline-warning">Cut</a>
            <form method="post" action="{{ url_for('index', prefix=prefix) }}" onsubmit="return confirm('Delete this folder marker?')">
              <input type="hidden" name="action" value="delete">
              <input type="hidden" name="key" value="{{ folder.prefix }}">
              <button type="submit" class="btn btn-sm btn-danger">Delete</button>
            </form>
          </div>
        </div>
        <form method="post" action="{{ url_for('index', prefix=prefix) }}" class="d-flex mt-2">
          <input type="hidden" name="action" value="rename_folder">
          <input type="hidden" name="old_prefix" value="{{ folder.prefix }}">
          <input type="text" name="new_name" class="form-control form-control-sm me-2" placeholder="New folder name" required>
          <button type="submit" class="btn btn-sm btn-outline-secondary">Rename</button>
        </form>
      </li>
    {% endfor %}
  </ul>
{% endif %}

<h4>Files</h4>
{% if not listing.files %}
  <p class="text-muted">No files</p>
{% else %}
  <table class="table table-striped align-middle">
    <thead>
      <tr><th>Name</th><th>Size</th><th>Last modified</th><th>Actions</th></tr>
    </thead>
    <tbody>
      {% for file in listing.files %}
        <tr>
          <td>
            {{ display_name(file.key, prefix) }}
            {% set link = public_url(public_base_url, file.key) %}
            {% if link %}<br><a class="small" href="{{ link }}" target="_blank">{{ link }}</a>{% endif %}
          </td>
          <td>{{ format_size(file.size) }}</td>
          <td>{{ format_last_modified(file.last_modified) }}</td>
          <td>
            <div class="d-flex gap-1 mb-1">
              <a href="{{ url_for('index', prefix=prefix, download=file.key) }}" class="btn btn-sm btn-outline-success">Download</a>
              <a href="{{ url_for('index', prefix=prefix, clipboard_action='copy', clipboard_key=file.key) }}" class="btn btn-sm btn-outline-primary">Copy</a>
              <a href="{{ url_for('index', prefix=prefix, clipboard_action='cut', clipboard_key=file.key) }}" class="btn btn-sm btn-outline-warning">Cut</a>
              <form method="post" action="{{ url_for('index', prefix=prefix) }}" onsubmit="return confirm('Delete this file?')">
                <input type="hidden" name="action" value="delete">
                <input type="hidden" name="key" value="{{ file.key }}">
                <button type="submit" class="btn btn-sm btn-danger">Delete</button>
              </form>
            </div>
            <form method="post" action="{{ url_for('index', prefix=prefix) }}" class="d-flex">
              <input type="hidden" name="action" value="rename">
              <input type="hidden" name="old_key" value="{{ file.key }}">
              <input type="text" name="new_name" class="form-control form-control-sm me-2" placeholder="New name" required>
              <button type="submit" class="btn btn-sm btn-outline-secondary">Rename</button>
            </form>
          </td>
        </tr>
      {% endfor %}
    </tbody>
  </table>
{% endif %}
"""
