from __future__ import annotations

from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field


def _doc_payload(model: BaseModel) -> Dict[str, Any]:
    # The document id lives in the path, never in the stored body.
    data = model.model_dump(by_alias=True)
    data.pop("id", None)
    return data


class ItemIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    name: str = Field(..., min_length=1, max_length=200)
    category: str = Field(default="", max_length=100)
    region_id: str = Field(default="", alias="regionId", max_length=128)
    approved: bool = Field(default=True)

    def to_doc(self) -> Dict[str, Any]:
        return _doc_payload(self)


class RegionIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    name: str = Field(..., min_length=1, max_length=200)

    def to_doc(self) -> Dict[str, Any]:
        return _doc_payload(self)


class AssignItemsRequest(BaseModel):
    item_ids: List[str] = Field(..., min_length=1, max_length=500)
