"""Rendering engines — pluggable first- and second-pass capabilities.

Built-in engines:
    KidaRenderer -- first pass, kida source + params -> HTML
    MarkdownRenderer -- first pass, Markdown -> HTML (requires patitas)
    KidaCompiler -- second pass, HTML -> render function
"""

from quill.engines.kida_engine import KidaCompiler, KidaRenderer
from quill.engines.markdown import MarkdownRenderer
from quill.engines.protocol import FirstPassEngine, RenderFunction, SecondPassEngine
from quill.engines.registry import EngineRegistry, default_registry

__all__ = [
    "EngineRegistry",
    "FirstPassEngine",
    "KidaCompiler",
    "KidaRenderer",
    "MarkdownRenderer",
    "RenderFunction",
    "SecondPassEngine",
    "default_registry",
]
