"""Module entry point for the S3 file manager.

Without a subcommand the web server starts. ``set-password`` and
``save-profile`` write the login password and connection profiles that the
server reads back from the OS keychain and the profiles file.
"""
import argparse
import getpass
import logging
import os
import sys

from .clipboard import InMemoryClipboardStore
from .controller import FileManagerController
from .presenter import FileManagerPresenter
from .profiles import ConnectionProfile, ProfileStorage, resolve_login_password, resolve_profile
from .services import S3ObjectStore
from .settings import SettingsStorage, apply_environment, configuration_problems
from .web import create_app

LOGGER = logging.getLogger("s3_file_manager")


def setup_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def build_app(environ=None, *, settings_storage=None, profile_storage=None, client_factory=None):
    env = os.environ if environ is None else environ
    settings_storage = settings_storage or SettingsStorage()
    profile_storage = profile_storage or ProfileStorage()
    settings = apply_environment(settings_storage.load(), env)
    profile = resolve_profile(settings.profile_name, profile_storage, env, default_region=settings.region)
    problems = configuration_problems(settings, profile)
    for problem in problems:
        LOGGER.warning("Configuration problem: %s", problem)

    store = S3ObjectStore(profile, client_factory=client_factory)
    controller = FileManagerController(
        store,
        settings.bucket,
        InMemoryClipboardStore(),
        page_size=settings.page_size,
    )
    presenter = FileManagerPresenter(controller, presign_expires=settings.presign_expires)
    login_password = resolve_login_password(settings.login_username, profile_storage, env)
    if not login_password:
        LOGGER.warning("No login password configured for '%s'; logins will be refused", settings.login_username)
    app = create_app(
        presenter,
        settings,
        login_password=login_password,
        secret_key=env.get("S3FM_SECRET_KEY"),
        problems=problems,
    )
    return app, settings


def cmd_serve(args: argparse.Namespace) -> int:
    app, settings = build_app()
    LOGGER.info("Serving bucket '%s' on http://%s:%d", settings.bucket, settings.host, settings.port)
    app.run(host=settings.host, port=settings.port, threaded=True)
    return 0


def cmd_set_password(args: argparse.Namespace, *, profile_storage=None, prompt=getpass.getpass) -> int:
    username = args.username or apply_environment(SettingsStorage().load()).login_username
    password = prompt(f"Password for '{username}': ")
    if not password:
        print("Password must not be empty.", file=sys.stderr)
        return 1
    if prompt("Repeat password: ") != password:
        print("Passwords do not match.", file=sys.stderr)
        return 1
    storage = profile_storage or ProfileStorage()
    if not storage.set_login_password(username, password):
        print("Could not store the password in the keychain.", file=sys.stderr)
        return 1
    print(f"Stored login password for '{username}'.")
    return 0


def cmd_save_profile(args: argparse.Namespace, *, profile_storage=None, prompt=getpass.getpass) -> int:
    secret_key = prompt(f"Secret key for '{args.name}' (empty keeps the stored one): ")
    profile = ConnectionProfile(
        name=args.name,
        endpoint_url=args.endpoint,
        access_key=args.access_key,
        secret_key=secret_key,
        region=args.region,
    )
    storage = profile_storage or ProfileStorage()
    stored = storage.upsert(profile)
    if secret_key and not stored:
        print("Profile saved, but the secret key could not be stored in the keychain.", file=sys.stderr)
        return 1
    print(f"Saved profile '{args.name}' to {storage.path}.")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="s3-file-manager",
        description="Manage the files of one S3 bucket from the browser.",
    )
    subparsers = parser.add_subparsers(dest="command")

    serve_p = subparsers.add_parser("serve", help="Run the web server (default)")
    serve_p.set_defaults(func=cmd_serve)

    password_p = subparsers.add_parser("set-password", help="Store the login password in the OS keychain")
    password_p.add_argument("--username", default="", help="Login name (defaults to the configured one)")
    password_p.set_defaults(func=cmd_set_password)

    profile_p = subparsers.add_parser("save-profile", help="Add or update a connection profile")
    profile_p.add_argument("name", help="Profile name, selected with S3FM_PROFILE")
    profile_p.add_argument("--endpoint", default="", help="Endpoint URL for S3-compatible services")
    profile_p.add_argument("--access-key", default="", help="Access key id")
    profile_p.add_argument("--region", default="", help="Region name")
    profile_p.set_defaults(func=cmd_save_profile)
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    settings = apply_environment(SettingsStorage().load())
    setup_logging(settings.log_level)
    func = getattr(args, "func", cmd_serve)
    return func(args)


if __name__ == "__main__":
    sys.exit(main())
