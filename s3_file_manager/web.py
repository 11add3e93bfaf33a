from __future__ import annotations
"""Flask front end: login gate, session handling and request parsing."""
import logging
import secrets
from typing import TYPE_CHECKING, Mapping

from flask import Flask, redirect, render_template_string, request, session, url_for

from . import paths, templates
from .actions import (
    Action,
    ActionResult,
    CreateFolderAction,
    DeleteAction,
    DownloadAction,
    ListAction,
    PasteAction,
    RenameAction,
    RenameFolderAction,
    SetClipboardAction,
    UploadAction,
)
from .models import ClipboardAction
from .presenter import FileManagerPresenter
from .settings import AppSettings
from .ui_utils import (
    build_breadcrumbs,
    display_name,
    format_last_modified,
    format_size,
    load_package_info,
    public_url,
)

if TYPE_CHECKING:
    from werkzeug.datastructures import FileStorage

LOGGER = logging.getLogger(__name__)

PUBLIC_ENDPOINTS = {"login", "static"}


def parse_query_action(args: Mapping[str, str]) -> Action:
    """Map the query string of a GET request onto an action."""

    download_key = args.get("download")
    if download_key:
        return DownloadAction(key=download_key)
    clipboard_key = args.get("clipboard_key")
    clipboard_action = args.get("clipboard_action")
    if clipboard_key and clipboard_action:
        try:
            return SetClipboardAction(action=ClipboardAction(clipboard_action), key=clipboard_key)
        except ValueError:
            LOGGER.debug("Ignoring unknown clipboard action '%s'", clipboard_action)
    return ListAction()


def parse_form_action(form: Mapping[str, str], files: Mapping[str, FileStorage]) -> Action | None:
    """Map a POSTed form onto an action, or ``None`` for unknown names."""

    name = form.get("action", "")
    if name == "upload":
        upload = files.get("file")
        if upload is None or not upload.filename:
            return UploadAction(filename="")
        return UploadAction(
            filename=upload.filename,
            stream=upload.stream,
            content_type=upload.mimetype or None,
        )
    if name == "create_folder":
        return CreateFolderAction(name=form.get("folder_name", ""))
    if name == "delete":
        return DeleteAction(key=form.get("key", ""))
    if name == "rename":
        return RenameAction(old_key=form.get("old_key", ""), new_name=form.get("new_name", ""))
    if name == "rename_folder":
        return RenameFolderAction(old_prefix=form.get("old_prefix", ""), new_name=form.get("new_name", ""))
    if name == "paste":
        return PasteAction()
    return None


def create_app(
    presenter: FileManagerPresenter,
    settings: AppSettings,
    *,
    login_password: str,
    secret_key: str | None = None,
    problems: list[str] | None = None,
) -> Flask:
    app = Flask(__name__)
    app.secret_key = secret_key or secrets.token_hex(32)
    app.config["SESSION_COOKIE_HTTPONLY"] = True
    app.config["SESSION_COOKIE_SAMESITE"] = "Lax"
    package_info = load_package_info()
    problems = list(problems or [])

    def render_page(title: str, body_template: str, status: int = 200, **context):
        body = render_template_string(body_template, **context)
        return render_template_string(templates.BASE, title=title, body=body, package_info=package_info), status

    def session_id() -> str:
        sid = session.get("sid")
        if not sid:
            sid = secrets.token_urlsafe(16)
            session["sid"] = sid
        return sid

    def render_result(prefix: str, result: ActionResult):
        return render_page(
            "S3 File Manager",
            templates.INDEX,
            result=result,
            listing=result.listing,
            prefix=prefix,
            parent=paths.parent_prefix(prefix),
            bucket=settings.bucket,
            breadcrumbs=build_breadcrumbs(prefix),
            public_base_url=settings.public_base_url,
            display_name=display_name,
            format_size=format_size,
            format_last_modified=format_last_modified,
            public_url=public_url,
        )

    @app.before_request
    def require_login():
        if request.endpoint in PUBLIC_ENDPOINTS:
            return None
        if session.get("logged_in"):
            return None
        return redirect(url_for("login"))

    @app.route("/login", methods=["GET", "POST"])
    def login():
        if session.get("logged_in"):
            return redirect(url_for("index"))
        error = ""
        if request.method == "POST":
            username = request.form.get("username", "")
            password = request.form.get("password", "")
            if _credentials_match(username, password, settings.login_username, login_password):
                session.clear()
                session["logged_in"] = True
                session["sid"] = secrets.token_urlsafe(16)
                LOGGER.info("User '%s' logged in from %s", username, request.remote_addr)
                return redirect(url_for("index"))
            LOGGER.warning("Rejected login for '%s' from %s", username, request.remote_addr)
            error = "Incorrect username or password."
        return render_page("Login to S3 File Manager", templates.LOGIN, status=401 if error else 200, error=error)

    @app.route("/logout")
    def logout():
        sid = session.get("sid")
        if sid:
            presenter.controller.clear_clipboard(sid)
        session.clear()
        return redirect(url_for("login"))

    @app.route("/", methods=["GET", "POST"])
    def index():
        if problems:
            return render_page("S3 File Manager", templates.CONFIG_ERROR, status=503, problems=problems)

        prefix = paths.normalize_prefix(request.args.get("prefix", ""))
        sid = session_id()
        if request.method == "POST":
            action = parse_form_action(request.form, request.files)
            if action is None:
                LOGGER.debug("Unknown action '%s'", request.form.get("action", ""))
                result = presenter.handle(sid, prefix, ListAction())
                result.error = result.error or "Unknown action."
                return render_result(prefix, result)
        else:
            action = parse_query_action(request.args)

        result = presenter.handle(sid, prefix, action)
        if result.is_redirect:
            return redirect(result.redirect_url)
        return render_result(prefix, result)

    return app


def _credentials_match(username: str, password: str, expected_username: str, expected_password: str) -> bool:
    if not expected_username or not expected_password:
        return False
    username_ok = secrets.compare_digest(username.encode("utf-8"), expected_username.encode("utf-8"))
    password_ok = secrets.compare_digest(password.encode("utf-8"), expected_password.encode("utf-8"))
    return username_ok and password_ok
