"""Heuristic role detection from Laravel / Inertia path conventions."""

from __future__ import annotations

from laracheck.rules.models import FileRole

_BACKEND_DIRS = (
    ("app/Http/Requests/", FileRole.REQUEST),
    ("app/Http/Resources/", FileRole.RESOURCE),
    ("app/Models/", FileRole.MODEL),
    ("app/Services/", FileRole.SERVICE),
)

_PAGE_DIRS = ("resources/js/Pages/", "resources/js/pages/")

_SCRIPT_EXTENSIONS = (".ts", ".tsx", ".js", ".jsx")


def classify(relative_path: str) -> FileRole:
    """Return the role of a file given its POSIX path relative to the project root.

    Anything that does not follow a recognised convention is ``UNKNOWN`` and
    only sees role-agnostic rules.
    """
    path = relative_path
    if path.startswith("./"):
        path = path[2:]
    name = path.rsplit("/", 1)[-1]

    if path.endswith(".php") and not path.endswith(".blade.php"):
        if path.startswith("app/Http/Controllers/"):
            # The base Controller.php has nothing to check.
            if name.endswith("Controller.php") and name != "Controller.php":
                return FileRole.CONTROLLER
            return FileRole.UNKNOWN
        for prefix, role in _BACKEND_DIRS:
            if path.startswith(prefix):
                return role
        return FileRole.UNKNOWN

    if not path.startswith("resources/js/"):
        return FileRole.UNKNOWN

    if path.endswith(".vue"):
        if path.startswith(_PAGE_DIRS):
            return FileRole.PAGE
        return FileRole.COMPONENT

    if path.endswith(_SCRIPT_EXTENSIONS) and not path.endswith(".d.ts"):
        return FileRole.SCRIPT

    return FileRole.UNKNOWN
