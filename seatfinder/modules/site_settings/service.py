from fastapi import HTTPException
from seatfinder.core.exceptions import BackendError
from seatfinder.modules.site_settings.schemas import SiteSettingCreate, SiteSettingResponse, SiteSettingFailure
from seatfinder.modules.tables.service import RowGateway
from typing import Dict, List, Optional, Tuple
import logging

logger = logging.getLogger(__name__)

TABLE = "site_settings"
LIST_LIMIT = 1000


class SiteSettingService:
    def __init__(self, gateway: RowGateway):
        self.gateway = gateway

    def list_settings(self) -> List[SiteSettingResponse]:
        rows = self.gateway.list_rows(TABLE, LIST_LIMIT, order_column="key")
        return [SiteSettingResponse(**row) for row in rows]

    def add_setting(self, setting_data: SiteSettingCreate) -> SiteSettingResponse:
        """Add a setting; a blank value is stored as null"""
        key = setting_data.key.strip()
        if not key:
            raise HTTPException(status_code=400, detail="Setting key is required")
        value = setting_data.value
        if value is not None and not value.strip():
            value = None
        row = self.gateway.insert_row(TABLE, {"key": key, "value": value})
        return SiteSettingResponse(**row)

    def save_changed(
        self, values: Dict[str, Optional[str]]
    ) -> Tuple[List[SiteSettingResponse], List[SiteSettingFailure]]:
        """
        Write only the settings whose edited value differs from the stored one.
        Every id is checked before anything is written. A failed write does not
        stop the batch; returns the updated settings and the failures.
        """
        current = {s.id: s for s in self.list_settings()}
        missing = [setting_id for setting_id in values if setting_id not in current]
        if missing:
            raise HTTPException(status_code=404, detail=f"Setting {missing[0]} not found")

        changed: List[SiteSettingResponse] = []
        failed: List[SiteSettingFailure] = []
        for setting_id, value in values.items():
            setting = current[setting_id]
            if setting.value == value:
                continue
            try:
                self.gateway.update_row(TABLE, setting_id, {"value": value})
            except BackendError as e:
                failed.append(SiteSettingFailure(id=setting_id, error=e.message))
                continue
            changed.append(setting.model_copy(update={"value": value}))
        if failed:
            logger.warning(f"Settings save: {len(failed)} of {len(values)} writes failed")
        return changed, failed

    def delete_setting(self, setting_id: str) -> None:
        self.gateway.delete_row(TABLE, setting_id)
