from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field


class ChartNode(BaseModel):
    kind: str
    key: str
    tooth: Optional[int] = None
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    rotation: float = 0.0
    fill: Optional[str] = None
    stroke: Optional[str] = None
    label: Optional[str] = None
    label_rotation: float = 0.0
    highlighted: bool = False
    attrs: dict[str, Any] = Field(default_factory=dict)
    children: list["ChartNode"] = Field(default_factory=list)

    def walk(self):
        yield self
        for child in self.children:
            yield from child.walk()


ChartNode.model_rebuild()


class LegendEntry(BaseModel):
    condition: str
    label: str
    color: str
    tint: str
    border: str


class DetailsTab(BaseModel):
    key: str
    title: str
    items: list[dict[str, Any]] = Field(default_factory=list)


class DetailsPanel(BaseModel):
    tooth: int
    title: str
    condition: str
    condition_label: str
    color: str
    summary: str
    surfaces: list[str] = Field(default_factory=list)
    selected: bool = False
    actions: list[str] = Field(default_factory=list)
    tabs: list[DetailsTab] = Field(default_factory=list)


class ChartView(BaseModel):
    design: str
    title: str
    width: float
    height: float
    nodes: list[ChartNode] = Field(default_factory=list)
    legend: list[LegendEntry] = Field(default_factory=list)
    details: Optional[DetailsPanel] = None
    placeholder: Optional[str] = None
    panels: dict[str, Any] = Field(default_factory=dict)

    def tooth_nodes(self) -> dict[int, ChartNode]:
        found: dict[int, ChartNode] = {}
        for node in self.nodes:
            for item in node.walk():
                if item.kind == "tooth" and item.tooth is not None:
                    found[item.tooth] = item
        return found
