"""
Schema of the JSON report printed by `whisker parse`.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class NodeInfo(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    index: int
    kind: str
    name: Optional[str] = None
    text: Optional[str] = None
    escape: Optional[bool] = None
    inverted: Optional[bool] = None
    start: Optional[int] = None
    end: Optional[int] = None
    indent: Optional[str] = None
    tags: Optional[str] = None


class ParseReport(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    template: str
    tags: str
    node_count: int = Field(alias="nodeCount")
    nodes: List[NodeInfo]


__all__ = ["NodeInfo", "ParseReport"]
