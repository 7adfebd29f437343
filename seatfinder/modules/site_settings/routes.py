from fastapi import APIRouter, Depends, BackgroundTasks
from seatfinder.core.dependencies import require_admin
from seatfinder.modules.activity.routes import get_activity_service
from seatfinder.modules.activity.schemas import ActivityAction
from seatfinder.modules.activity.service import ActivityLogService
from seatfinder.modules.site_settings.schemas import (
    SiteSettingCreate, SiteSettingResponse, SiteSettingsBatchUpdate, SiteSettingsBatchResult
)
from seatfinder.modules.site_settings.service import SiteSettingService
from seatfinder.modules.tables.routes import get_row_gateway
from seatfinder.modules.tables.service import RowGateway
from typing import Dict, List

router = APIRouter(prefix="/admin/settings", tags=["site-settings"])


def get_site_setting_service(gateway: RowGateway = Depends(get_row_gateway)) -> SiteSettingService:
    return SiteSettingService(gateway)


@router.get("", response_model=List[SiteSettingResponse])
async def list_settings(
    user_data: Dict = Depends(require_admin),
    service: SiteSettingService = Depends(get_site_setting_service)
):
    """List site settings ordered by key"""
    return service.list_settings()


@router.post("", response_model=SiteSettingResponse, status_code=201)
async def add_setting(
    setting_data: SiteSettingCreate,
    background_tasks: BackgroundTasks,
    user_data: Dict = Depends(require_admin),
    service: SiteSettingService = Depends(get_site_setting_service),
    activity: ActivityLogService = Depends(get_activity_service)
):
    setting = service.add_setting(setting_data)
    background_tasks.add_task(
        activity.record,
        user_data["id"],
        ActivityAction.INSERT,
        "site_setting",
        setting.id,
        f"Added setting {setting.key}",
    )
    return setting


@router.put("", response_model=SiteSettingsBatchResult)
async def save_settings(
    batch: SiteSettingsBatchUpdate,
    background_tasks: BackgroundTasks,
    user_data: Dict = Depends(require_admin),
    service: SiteSettingService = Depends(get_site_setting_service),
    activity: ActivityLogService = Depends(get_activity_service)
):
    """Save edited values; unchanged settings are not written, failed writes are reported"""
    changed, failed = service.save_changed(batch.values)
    for setting in changed:
        background_tasks.add_task(
            activity.record,
            user_data["id"],
            ActivityAction.UPDATE,
            "site_setting",
            setting.id,
            f"Updated setting {setting.key}",
        )
    return SiteSettingsBatchResult(updated=[s.id for s in changed], failed=failed)


@router.delete("/{setting_id}", status_code=204)
async def delete_setting(
    setting_id: str,
    background_tasks: BackgroundTasks,
    user_data: Dict = Depends(require_admin),
    service: SiteSettingService = Depends(get_site_setting_service),
    activity: ActivityLogService = Depends(get_activity_service)
):
    service.delete_setting(setting_id)
    background_tasks.add_task(
        activity.record,
        user_data["id"],
        ActivityAction.DELETE,
        "site_setting",
        setting_id,
        f"Deleted setting {setting_id}",
    )
