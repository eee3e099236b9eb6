"""FastAPI web app for browsing tracked captures and editing the retention policy."""

from __future__ import annotations

from typing import Any

from fastapi import Depends, FastAPI, HTTPException
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from tempsnap.camera.naming import MIME_TYPES
from tempsnap.clock import utc_now
from tempsnap.context import AppContext, get_context
from tempsnap.enums import FlashMode, LensFacing, VideoQuality
from tempsnap.service import MediaRecord, remaining_label, remaining_urgency


app = FastAPI(title="TempSnap")


class KeepRequest(BaseModel):
    ids: list[int] = Field(default_factory=list)


class SettingsUpdate(BaseModel):
    retention_days: int | None = Field(default=None, ge=1)
    video_quality: VideoQuality | None = None
    notify_on_cleanup: bool | None = None
    last_lens_facing: LensFacing | None = None
    last_flash_mode: FlashMode | None = None


def _item_payload(record: MediaRecord) -> dict[str, Any]:
    now = utc_now()
    return {
        "id": record.id,
        "locator": record.locator,
        "kind": record.kind.value,
        "mime_type": MIME_TYPES[record.kind],
        "created_at": record.created_at.isoformat(),
        "expires_at": record.expires_at.isoformat(),
        "duration_ms": record.duration_ms,
        "remaining": remaining_label(record, now),
        "urgency": remaining_urgency(record, now).value,
    }


def _settings_payload(context: AppContext) -> dict[str, Any]:
    policy = context.policy.snapshot()
    return {
        "retention_days": policy.retention_days,
        "video_quality": policy.video_quality.value,
        "notify_on_cleanup": policy.notify_on_cleanup,
        "last_lens_facing": policy.last_lens_facing.value,
        "last_flash_mode": policy.last_flash_mode.value,
    }


@app.get("/api/items")
def items_api(context: AppContext = Depends(get_context)) -> JSONResponse:
    rows = context.store.all_ordered_by_created_desc()
    return JSONResponse({"total": len(rows), "items": [_item_payload(row) for row in rows]})


@app.get("/api/items/latest")
def latest_item_api(context: AppContext = Depends(get_context)) -> JSONResponse:
    record = context.store.latest()
    if record is None:
        raise HTTPException(status_code=404, detail="No tracked items")
    return JSONResponse(_item_payload(record))


@app.get("/api/items/count")
def item_count_api(context: AppContext = Depends(get_context)) -> dict[str, int]:
    return {"count": context.store.count()}


@app.post("/api/items/keep")
def keep_items_api(body: KeepRequest, context: AppContext = Depends(get_context)) -> dict[str, int]:
    # kept items are only untracked; their files stay on disk
    kept = sum(1 for record_id in dict.fromkeys(body.ids) if context.store.delete_by_id(record_id))
    return {"kept": kept}


@app.get("/api/settings")
def settings_api(context: AppContext = Depends(get_context)) -> JSONResponse:
    return JSONResponse(_settings_payload(context))


@app.put("/api/settings")
def update_settings_api(
    body: SettingsUpdate,
    context: AppContext = Depends(get_context),
) -> JSONResponse:
    policy = context.policy
    if body.retention_days is not None:
        policy.set_retention_days(body.retention_days)
    if body.video_quality is not None:
        policy.set_video_quality(body.video_quality)
    if body.notify_on_cleanup is not None:
        policy.set_notify_on_cleanup(body.notify_on_cleanup)
    if body.last_lens_facing is not None:
        policy.set_last_lens_facing(body.last_lens_facing)
    if body.last_flash_mode is not None:
        policy.set_last_flash_mode(body.last_flash_mode)
    return JSONResponse(_settings_payload(context))


@app.post("/api/cleanup")
def cleanup_api(context: AppContext = Depends(get_context)) -> JSONResponse:
    report = context.scheduler.trigger()
    if report is None:
        raise HTTPException(status_code=409, detail="Cleanup already in progress")
    return JSONResponse(
        {
            "swept_at": report.swept_at.isoformat(),
            "expired": report.expired,
            "deleted": report.deleted,
            "failed": report.failed,
            "outcomes": {outcome.value: count for outcome, count in report.outcomes.items()},
            "notified": report.notified,
        }
    )


@app.get("/healthz")
def healthz() -> dict[str, str]:
    return {"status": "ok"}
