"""Rackup script loading.

A rackup script is a Python file evaluated once when the servlet is
constructed. It produces the WSGI application either through the
builder globals injected into it:

    use(RequestTimer)
    map("/static", StaticFiles("public"))
    run(MyApp())

or, for plain WSGI scripts, by defining a module-level callable named
``application``. The script's directory is importable while it runs,
so it can import sibling modules.
"""

import logging
import os
import runpy
import sys
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

WSGIApp = Callable[..., Iterable[bytes]]

APPLICATION_NAME = "application"


class URLMap:
    """Dispatches requests to applications mounted at path prefixes.

    The longest prefix matching on a segment boundary wins; the matched
    prefix moves from PATH_INFO to SCRIPT_NAME before the mounted
    application is called.
    """

    def __init__(self, mapping: dict[str, WSGIApp]):
        self._entries = sorted(
            ((self.normalize_prefix(prefix), app) for prefix, app in mapping.items()),
            key=lambda entry: len(entry[0]),
            reverse=True,
        )

    @staticmethod
    def normalize_prefix(prefix: str) -> str:
        # "" and "/" both mean "everything"
        if prefix in ("", "/"):
            return ""
        if not prefix.startswith("/"):
            raise ValueError(f"Mount prefix must start with '/': {prefix!r}")
        return prefix.rstrip("/")

    def __call__(self, environ: dict[str, Any], start_response: Callable[..., Any]) -> Iterable[bytes]:
        path_info = environ.get("PATH_INFO", "")
        for prefix, app in self._entries:
            if path_info == prefix or path_info.startswith(prefix + "/") or not prefix:
                environ = dict(environ)
                environ["SCRIPT_NAME"] = environ.get("SCRIPT_NAME", "") + prefix
                environ["PATH_INFO"] = path_info[len(prefix):]
                return app(environ, start_response)

        body = f"Not Found: {path_info}".encode()
        start_response(
            "404 Not Found",
            [("Content-Type", "text/plain"), ("Content-Length", str(len(body)))],
        )
        return [body]


class Builder:
    """Collects middleware, mounts and the endpoint declared by a script."""

    def __init__(self) -> None:
        self._middleware: list[tuple[Callable[..., WSGIApp], tuple[Any, ...], dict[str, Any]]] = []
        self._mounts: dict[str, WSGIApp] = {}
        self._endpoint: WSGIApp | None = None

    @property
    def configured(self) -> bool:
        """True once run() or map() has been called."""
        return self._endpoint is not None or bool(self._mounts)

    def use(self, middleware: Callable[..., WSGIApp], *args: Any, **kwargs: Any) -> None:
        """Wrap the application in middleware(app, *args, **kwargs).

        Middleware declared first ends up outermost.
        """
        if not callable(middleware):
            raise TypeError(f"middleware must be callable, got {middleware!r}")
        self._middleware.append((middleware, args, kwargs))

    def run(self, app: WSGIApp) -> None:
        """Set the endpoint application."""
        if not callable(app):
            raise TypeError(f"application must be callable, got {app!r}")
        self._endpoint = app

    def map(self, prefix: str, app: WSGIApp) -> None:
        """Mount an application under a path prefix."""
        if not callable(app):
            raise TypeError(f"application must be callable, got {app!r}")
        self._mounts[URLMap.normalize_prefix(prefix)] = app

    def to_app(self) -> WSGIApp:
        """Compose the middleware stack around the endpoint.

        Raises:
            ValueError: If neither run() nor map() was called.
        """
        app: WSGIApp
        if self._mounts:
            mapping = dict(self._mounts)
            if self._endpoint is not None:
                mapping.setdefault("", self._endpoint)
            app = URLMap(mapping)
        elif self._endpoint is not None:
            app = self._endpoint
        else:
            raise ValueError("Builder has no application: call run() or map()")

        for middleware, args, kwargs in reversed(self._middleware):
            app = middleware(app, *args, **kwargs)
        return app


@dataclass(frozen=True)
class RackupApplication:
    """Result of evaluating a rackup script."""

    app: WSGIApp
    script_path: Path

    @property
    def name(self) -> str:
        """Short name used for the application's logger."""
        return self.script_path.stem


def resolve_script_path(path: str) -> Path:
    """Validate that a rackup script exists and is a readable file.

    Raises:
        ValueError: If the script cannot be found or read.
    """
    script_path = Path(path)
    resolved = script_path.resolve()
    if not script_path.is_file():
        raise ValueError(
            f"Could not find rack script specified by [{path}] and resolved to [{resolved}]"
        )
    if not os.access(script_path, os.R_OK):
        raise ValueError(f"Could not read rack script [{resolved}]")
    return resolved


def _evict_sibling_modules(script_dir: Path, loaded_before: set[str]) -> None:
    """Drop modules the script imported from its own directory.

    Another script may import a sibling module with the same name; it
    must get its own copy, not the one cached for this script.
    """
    for name in set(sys.modules) - loaded_before:
        module_file = getattr(sys.modules[name], "__file__", None)
        if module_file and Path(module_file).resolve().is_relative_to(script_dir):
            del sys.modules[name]


def load_application(path: str) -> RackupApplication:
    """Evaluate a rackup script and return its application.

    Args:
        path: Path to the rackup script.

    Returns:
        RackupApplication wrapping the resolved WSGI callable.

    Raises:
        ValueError: If the script is missing or defines no application.
    """
    script_path = resolve_script_path(path)
    builder = Builder()
    script_globals = {"use": builder.use, "run": builder.run, "map": builder.map}

    script_dir = str(script_path.parent)
    loaded_before = set(sys.modules)
    sys.path.insert(0, script_dir)
    try:
        namespace = runpy.run_path(
            str(script_path), init_globals=script_globals, run_name="__rackup__"
        )
    finally:
        try:
            sys.path.remove(script_dir)
        except ValueError:
            pass
        _evict_sibling_modules(script_path.parent, loaded_before)

    if builder.configured:
        app = builder.to_app()
    else:
        app = namespace.get(APPLICATION_NAME)
        if not callable(app):
            raise ValueError(
                f"Rack script [{script_path}] neither called run() nor defined a callable '{APPLICATION_NAME}'"
            )

    logger.info(
        "Loaded rack application",
        extra={"script": str(script_path), "application": repr(app)},
    )
    return RackupApplication(app=app, script_path=script_path)
