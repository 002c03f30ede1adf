from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, StrictStr


class SectionCreate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: StrictStr = Field(..., min_length=1)


class SectionUpdate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: Optional[StrictStr] = Field(default=None, min_length=1)
