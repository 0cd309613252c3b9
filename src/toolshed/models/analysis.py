"""Models for barcode lookups, AI item analysis and task tool matching."""

from __future__ import annotations

from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

MatchStatus = Literal["owned", "alternative", "missing"]
SpecValue = Union[str, int, float, bool]


class ProductLookupResult(BaseModel):
    """Product metadata returned by an external barcode lookup source."""

    title: Optional[str] = None
    description: Optional[str] = None
    brand: Optional[str] = None
    category: Optional[str] = None
    image_url: Optional[str] = Field(default=None, alias="imageUrl")
    product_url: Optional[str] = Field(default=None, alias="productUrl")

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @property
    def has_signal(self) -> bool:
        """True when the lookup identifies the product beyond links/images."""

        return bool(self.title or self.brand or self.description or self.category)


class ToolAnalysis(BaseModel):
    """Structured item metadata produced by AI analysis of a photo or barcode."""

    name: str = "Unknown Item"
    description: str = ""
    category: str = ""
    tags: list[str] = Field(default_factory=list)
    estimated_price: Optional[str] = Field(default=None, alias="estimatedPrice")
    specs: dict[str, SpecValue] = Field(default_factory=dict)
    manual_search_query: Optional[str] = Field(default=None, alias="manualSearchQuery")
    video_search_query: Optional[str] = Field(default=None, alias="videoSearchQuery")
    product_url: Optional[str] = Field(default=None, alias="productUrl")
    manual_url: Optional[str] = Field(default=None, alias="manualUrl")
    video_url: Optional[str] = Field(default=None, alias="videoUrl")
    image_url: Optional[str] = Field(default=None, alias="imageUrl")
    requires_maintenance: bool = Field(default=False, alias="requiresMaintenance")
    maintenance_interval_days: Optional[int] = Field(default=None, alias="maintenanceIntervalDays")
    maintenance_task: Optional[str] = Field(default=None, alias="maintenanceTask")

    model_config = ConfigDict(populate_by_name=True)


class ToolRequirement(BaseModel):
    """A tool needed for a task, optionally carrying the AI's own match proposal."""

    name: str = ""
    description: str = ""
    category: str = ""
    required: bool = True
    proposed_status: Optional[MatchStatus] = None
    owned_tool_id: Optional[str] = None
    alternative_tool_id: Optional[str] = None
    alternative_reason: Optional[str] = None

    model_config = ConfigDict(frozen=True)


class OwnedToolRef(BaseModel):
    """Reference to the inventory item that satisfies a requirement."""

    id: str
    name: str
    location: str

    model_config = ConfigDict(frozen=True)


class AlternativeToolRef(BaseModel):
    """Reference to an inventory item that can substitute for a requirement."""

    id: str
    name: str
    location: str
    reason: str

    model_config = ConfigDict(frozen=True)


class ToolMatch(BaseModel):
    """Classification of one requirement against the inventory snapshot."""

    required_tool_name: str = Field(alias="requiredToolName")
    description: str
    category: str
    required: bool = True
    match_status: MatchStatus = Field(alias="matchStatus")
    owned_tool: Optional[OwnedToolRef] = Field(default=None, alias="ownedTool")
    alternative_tool: Optional[AlternativeToolRef] = Field(default=None, alias="alternativeTool")
    score: float = 0.0

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @property
    def matched_item_id(self) -> Optional[str]:
        if self.owned_tool is not None:
            return self.owned_tool.id
        if self.alternative_tool is not None:
            return self.alternative_tool.id
        return None


class WorkAnalysisResult(BaseModel):
    """Outcome of asking the assistant which tools a task needs."""

    task: str
    tool_matches: list[ToolMatch] = Field(default_factory=list, alias="toolMatches")
    additional_materials: list[str] = Field(default_factory=list, alias="additionalMaterials")
    safety_tips: list[str] = Field(default_factory=list, alias="safetyTips")
    shopping_list_added: list[str] = Field(default_factory=list, alias="shoppingListAdded")

    model_config = ConfigDict(populate_by_name=True)


def dump_wire(model: BaseModel) -> dict[str, Any]:
    """Serialize a model with its camelCase wire aliases."""

    return model.model_dump(mode="json", by_alias=True)


__all__ = [
    "AlternativeToolRef",
    "MatchStatus",
    "OwnedToolRef",
    "ProductLookupResult",
    "SpecValue",
    "ToolAnalysis",
    "ToolMatch",
    "ToolRequirement",
    "WorkAnalysisResult",
    "dump_wire",
]
