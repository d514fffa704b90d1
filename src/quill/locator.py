"""Resource location — logical names to filesystem paths.

Names that already look like paths (``/abs``, ``./rel``, ``../up``) are
used verbatim. Everything else is joined onto the configured root and
the views or public directory offset.

Pure string computation: no filesystem access, no errors. A bad name
surfaces later as a read failure.
"""

import os
import re
from typing import Literal

from quill.config import ViewsConfig

DirKind = Literal["views", "public"]

_PATH_RE = re.compile(r"^\.?\.?" + re.escape(os.sep))


def has_path(name: str | None) -> bool:
    """Whether *name* is already in path format."""
    return bool(_PATH_RE.match(name or ""))


def make_path(name: str | None, directory: str, root: str | os.PathLike[str]) -> str:
    """Join *root*, *directory* and *name* unless *name* is already a path."""
    if name and has_path(name):
        return name
    return os.path.join(root, directory, name or "")


def add_extension(name: str, ext: str) -> str:
    """Append ``.ext`` when *name* has no extension."""
    if os.path.splitext(name)[1]:
        return name
    return f"{name}.{ext}"


class Locator:
    """Resolve logical names against a :class:`ViewsConfig`."""

    __slots__ = ("_config",)

    def __init__(self, config: ViewsConfig) -> None:
        self._config = config

    @property
    def config(self) -> ViewsConfig:
        return self._config

    def directory(self, kind: DirKind) -> str:
        """The directory offset configured for *kind*."""
        if kind == "public":
            return self._config.public_dir
        return self._config.views_dir

    def resolve(self, name: str | None, kind: DirKind = "views") -> str:
        """Map *name* to a path under the configured root."""
        return make_path(name, self.directory(kind), self._config.root)
