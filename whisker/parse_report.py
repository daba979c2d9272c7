"""
Builds the `whisker parse` report from a parsed template.
"""

from __future__ import annotations

from .parse_report_schema import NodeInfo, ParseReport
from .template.nodes import (
    CommentNode, DelimiterNode, PartialNode, SectionNode,
    TemplateAST, TemplateNode, TextNode, VariableNode,
)
from .template.tokens import Tags


def _node_info(index: int, node: TemplateNode) -> NodeInfo:
    if isinstance(node, TextNode):
        return NodeInfo(index=index, kind="text", text=node.text)
    if isinstance(node, VariableNode):
        return NodeInfo(index=index, kind="variable", name=node.name, escape=node.escape)
    if isinstance(node, SectionNode):
        return NodeInfo(
            index=index,
            kind="section",
            name=node.name,
            inverted=node.inverted,
            start=node.start,
            end=node.end,
            tags=str(node.tags),
        )
    if isinstance(node, PartialNode):
        return NodeInfo(index=index, kind="partial", name=node.name, indent=node.indent or None)
    if isinstance(node, CommentNode):
        return NodeInfo(index=index, kind="comment", text=node.text)
    if isinstance(node, DelimiterNode):
        return NodeInfo(index=index, kind="delimiters", tags=str(node.tags))
    raise TypeError(f"Unknown node type: {type(node).__name__}")


def build_parse_report(template_name: str, ast: TemplateAST, tags: Tags) -> ParseReport:
    return ParseReport(
        template=template_name,
        tags=str(tags),
        node_count=len(ast),
        nodes=[_node_info(i, node) for i, node in enumerate(ast)],
    )


__all__ = ["build_parse_report"]
