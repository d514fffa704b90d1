"""Kida engines for both rendering passes.

First pass renders template source with static params. The environment
is rooted at the directory of ``params["filename"]`` so ``{% include %}``
and ``{% extends %}`` resolve next to the source file. Markup meant for
the second pass is wrapped in ``{% raw %}`` so it survives the first.

Second pass compiles markup once; the returned function renders it per
request with a fresh locals mapping.
"""

import os
from collections.abc import Mapping
from typing import Any

from kida import Environment, FileSystemLoader

from quill.engines.helpers import BUILTIN_HELPERS
from quill.engines.protocol import RenderFunction


def _apply_globals(env: Environment, globals_: Mapping[str, Any]) -> Environment:
    for name, value in globals_.items():
        env.add_global(name, value)
    return env


class KidaRenderer:
    """First-pass engine: kida source + params -> HTML."""

    __slots__ = ("_autoescape", "_envs", "_globals")

    def __init__(
        self,
        *,
        autoescape: bool = True,
        globals_: Mapping[str, Any] | None = None,
    ) -> None:
        self._autoescape = autoescape
        self._globals = dict(BUILTIN_HELPERS if globals_ is None else globals_)
        # One environment per template directory
        self._envs: dict[str, Environment] = {}

    def _environment(self, directory: str) -> Environment:
        env = self._envs.get(directory)
        if env is None:
            env = Environment(
                loader=FileSystemLoader(directory),
                autoescape=self._autoescape,
            )
            self._envs[directory] = _apply_globals(env, self._globals)
        return env

    def render(self, source: str, params: Mapping[str, Any]) -> str:
        filename = params.get("filename")
        directory = os.path.dirname(str(filename)) if filename else os.getcwd()
        template = self._environment(directory or os.curdir).from_string(source)
        return template.render(dict(params))


class KidaCompiler:
    """Second-pass engine: HTML markup -> render function."""

    __slots__ = ("_env",)

    def __init__(
        self,
        *,
        autoescape: bool = True,
        globals_: Mapping[str, Any] | None = None,
    ) -> None:
        env = Environment(autoescape=autoescape)
        self._env = _apply_globals(env, BUILTIN_HELPERS if globals_ is None else globals_)

    def compile(self, markup: str) -> RenderFunction:
        template = self._env.from_string(markup)

        def render(locals_: Mapping[str, Any]) -> str:
            return template.render(dict(locals_))

        return render
