from pydantic import BaseModel, Field
from typing import Dict, List, Optional
from datetime import datetime


class SiteSettingCreate(BaseModel):
    key: str = Field(..., min_length=1)
    value: Optional[str] = None


class SiteSettingResponse(BaseModel):
    id: str
    key: str
    value: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class SiteSettingsBatchUpdate(BaseModel):
    # setting id -> edited value
    values: Dict[str, Optional[str]]


class SiteSettingFailure(BaseModel):
    id: str
    error: str


class SiteSettingsBatchResult(BaseModel):
    updated: List[str] = []
    failed: List[SiteSettingFailure] = []
