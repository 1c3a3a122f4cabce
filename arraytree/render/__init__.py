"""Template rendering for ArrayTree.

Turns a linearized (or fused) tree into nested text such as HTML lists:

    from arraytree.render import TreeRenderer, View

    view = View().add({"wrapper": "<nav>{{}}</nav>"})
    html = TreeRenderer(tree, view).render()
"""

from .template import (
    Replacer,
    ReplacerRegistry,
    TokenTemplate,
    compile_token_pattern,
    split_template,
)
from .view import ElementTemplate, LevelView, View
from .output import RenderEvent, TreeRenderer, iter_render_events

__all__ = [
    "Replacer",
    "ReplacerRegistry",
    "TokenTemplate",
    "compile_token_pattern",
    "split_template",
    "ElementTemplate",
    "LevelView",
    "View",
    "RenderEvent",
    "TreeRenderer",
    "iter_render_events",
]
