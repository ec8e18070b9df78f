# src/logdispatch/core/logging/interpolate.py
"""
Placeholder interpolation for log messages.

A message may contain `{key}` placeholders that are replaced by values from the
caller's context mapping, plus a few special items:

    {post_vars}     dump of the current request's posted form data
    {get_vars}      dump of the current request's query parameters
    {env}           runtime environment name
    {env:FOO}       value of environment variable FOO, or "n/a"
    {file} {line}   source location of the logging call
    {session_vars}  dump of the session, only while a session is active

The context key "exception" is special: a raised exception renders as
"<message> <file>:<line>" pointing at the frame it was raised from.

All replacements are applied in a single pass, longest placeholder first, and
the output is never scanned again. A context value that itself looks like a
placeholder (e.g. "{env}") therefore appears verbatim.

File paths are sanitized before they reach a log line: the application root,
the system (library) root and the public root are replaced by the markers
APPPATH/, SYSTEMPATH/ and FCPATH/.
"""

from __future__ import annotations

import inspect
import os
import re
import traceback
from dataclasses import dataclass
from pathlib import Path
from pprint import pformat
from typing import Any, Mapping

from .context import RuntimeSnapshot

# Frames from files in this directory belong to the logging system and are
# skipped when looking for the real caller.
_LOGGING_DIR = os.path.dirname(os.path.abspath(__file__))
_PACKAGE_ROOT = Path(__file__).resolve().parents[2]

_ENV_TOKEN = re.compile(r"\{env:([^{}]+)\}")

UNKNOWN = "unknown"


@dataclass(frozen=True)
class PathMarkers:
    """Filesystem roots hidden behind symbolic markers in logged paths."""

    app_path: Path | None = None
    system_path: Path | None = None
    public_path: Path | None = None

    @classmethod
    def default(cls) -> "PathMarkers":
        return cls(app_path=Path.cwd(), system_path=_PACKAGE_ROOT)

    def markers(self) -> list[tuple[str, str]]:
        pairs = [
            (self.app_path, "APPPATH/"),
            (self.system_path, "SYSTEMPATH/"),
            (self.public_path, "FCPATH/"),
        ]
        return [(str(root).rstrip(os.sep) + os.sep, marker) for root, marker in pairs if root]


def clean_file_names(file: str, paths: PathMarkers | None = None) -> str:
    """
    Replace known root prefixes in a path with their markers, i.e.

        /var/www/site/app/controllers/home.py
            becomes:
        APPPATH/controllers/home.py
    """
    for prefix, marker in (paths or PathMarkers.default()).markers():
        file = file.replace(prefix, marker)
    return file


def determine_file() -> tuple[str, int | str]:
    """
    Return (file, line) of the first stack frame outside the logging system.

    Frames from interpolation, file resolution and dispatch all live in this
    package directory, so they are skipped by file name.
    """
    frame = inspect.currentframe()
    try:
        while frame is not None:
            filename = os.path.abspath(frame.f_code.co_filename)
            if os.path.dirname(filename) != _LOGGING_DIR:
                return filename, frame.f_lineno
            frame = frame.f_back
    finally:
        # Break the reference cycle created by holding a frame object.
        del frame
    return UNKNOWN, UNKNOWN


def _describe_exception(exc: BaseException, paths: PathMarkers | None) -> str | None:
    if exc.__traceback__ is None:
        return None
    origin = traceback.extract_tb(exc.__traceback__)[-1]
    return f"{exc} {clean_file_names(origin.filename, paths)}:{origin.lineno}"


def _replace_all(message: str, replace: Mapping[str, str]) -> str:
    if not replace:
        return message
    # Longest key first so "{env:HOME}" wins over "{env}" at the same position.
    keys = sorted(replace, key=len, reverse=True)
    pattern = re.compile("|".join(re.escape(key) for key in keys))
    return pattern.sub(lambda match: replace[match.group(0)], message)


def interpolate(
    message: Any,
    context: Mapping[Any, Any] | None,
    runtime: RuntimeSnapshot,
    *,
    paths: PathMarkers | None = None,
) -> Any:
    """
    Expand the placeholders of `message` using `context` and the runtime snapshot.

    Non-string messages are returned unchanged; the caller decides how to render them.
    """
    if not isinstance(message, str):
        return message

    context = context or {}
    replace: dict[str, str] = {}

    for key, val in context.items():
        if key == "exception" and isinstance(val, BaseException):
            described = _describe_exception(val, paths)
            if described is not None:
                val = described
        replace["{" + str(key) + "}"] = str(val)

    # Special placeholders, computed only when the message asks for them.
    if "{post_vars}" in message:
        replace["{post_vars}"] = "POST: " + pformat(dict(runtime.post_vars))
    if "{get_vars}" in message:
        replace["{get_vars}"] = "GET: " + pformat(dict(runtime.get_vars))
    if "{env}" in message:
        replace["{env}"] = runtime.environment

    # Allow us to log the file/line that we are logging from.
    if "{file}" in message:
        if "file" in context:
            file, line = str(context["file"]), context.get("line", UNKNOWN)
        else:
            file, line = determine_file()
        replace["{file}"] = clean_file_names(file, paths) if file != UNKNOWN else file
        replace["{line}"] = str(line)

    if "{env:" in message:
        for name in _ENV_TOKEN.findall(message):
            replace["{env:" + name + "}"] = runtime.env_vars.get(name, "n/a")

    if runtime.session is not None:
        replace["{session_vars}"] = "SESSION: " + pformat(dict(runtime.session))

    return _replace_all(message, replace)


__all__ = ["PathMarkers", "clean_file_names", "determine_file", "interpolate", "UNKNOWN"]
