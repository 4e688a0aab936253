"""API routes for production entries and their approval"""
from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from datetime import date
from typing import Any, Dict, List, Optional, Union
import logging

from analytics import entry_metrics
from auth import get_current_user, require_roles
from models import ProductionEntry, User, FOUR_M_FIELDS, PENDING, APPROVED, REJECTED, TEAM_LEADER, SUPERVISOR
from services import (
    fetch_entries, get_entry, find_entry_for_slot, get_first_shift_entry,
    create_entry, update_entry, set_entry_status, delete_entry
)
from utils import parse_int, date_key

logger = logging.getLogger(__name__)
router = APIRouter()


class EntryPayload(BaseModel):
    """Model for entry create/update requests"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    date: date
    line: str
    shift: str
    hour: str
    model: str = ''
    team_leader: str = ''
    shift_in_charge: str = ''
    operator_names: List[str] = []
    station_names: List[str] = []
    available_time: Union[int, str] = 0  # "480" as sent by the form
    line_capacity: Union[int, str] = 0   # "100"
    loss_time: int = Field(0, ge=0)
    production_type: str = 'SINGLE'
    ppc_target: Optional[int] = Field(None, ge=0)
    ppc_target_lh: Optional[int] = Field(None, ge=0, alias='ppcTargetLH')
    ppc_target_rh: Optional[int] = Field(None, ge=0, alias='ppcTargetRH')
    good_parts: Optional[int] = Field(None, ge=0)
    good_parts_lh: Optional[int] = Field(None, ge=0, alias='goodPartsLH')
    good_parts_rh: Optional[int] = Field(None, ge=0, alias='goodPartsRH')
    rejects: Optional[int] = Field(None, ge=0)
    rejects_lh: Optional[int] = Field(None, ge=0, alias='rejectsLH')
    rejects_rh: Optional[int] = Field(None, ge=0, alias='rejectsRH')
    spd_parts: Optional[int] = Field(None, ge=0)
    spd_parts_lh: Optional[int] = Field(None, ge=0, alias='spdPartsLH')
    spd_parts_rh: Optional[int] = Field(None, ge=0, alias='spdPartsRH')
    problem_head: str = ''
    description: str = ''
    responsibility: str = ''
    defect_type: Optional[str] = None
    new_defect_description: Optional[str] = None
    new_defect_corrective_action: Optional[str] = None
    rejection_details: List[Dict[str, Any]] = []
    has_4m_change: bool = Field(False, alias='has4MChange')
    man_change: Optional[bool] = None
    man_reason: Optional[str] = None
    man_cc: Optional[str] = Field(None, alias='manCC')
    man_sc: Optional[str] = Field(None, alias='manSC')
    man_general: Optional[str] = None
    machine_change: Optional[bool] = None
    machine_reason: Optional[str] = None
    machine_cc: Optional[str] = Field(None, alias='machineCC')
    machine_sc: Optional[str] = Field(None, alias='machineSC')
    machine_general: Optional[str] = None
    material_change: Optional[bool] = None
    material_reason: Optional[str] = None
    material_cc: Optional[str] = Field(None, alias='materialCC')
    material_sc: Optional[str] = Field(None, alias='materialSC')
    material_general: Optional[str] = None
    method_change: Optional[bool] = None
    method_reason: Optional[str] = None
    method_cc: Optional[str] = Field(None, alias='methodCC')
    method_sc: Optional[str] = Field(None, alias='methodSC')
    method_general: Optional[str] = None

    def apply_to(self, entry: ProductionEntry) -> ProductionEntry:
        """Copy the submitted fields onto `entry`, parsing string counters"""
        data = self.model_dump()
        data['available_time'] = parse_int(self.available_time)
        data['line_capacity'] = parse_int(self.line_capacity)
        data['production_type'] = self.production_type.upper()
        data['defect_type'] = self.defect_type.upper() if self.defect_type else None
        data['new_defect_description'] = self.new_defect_description or None
        data['new_defect_corrective_action'] = self.new_defect_corrective_action or None
        # Unticked flags and blank texts are stored as NULL
        for column in FOUR_M_FIELDS:
            data[column] = data[column] or None
        for name, value in data.items():
            setattr(entry, name, value)
        return entry

    def to_entry(self, submitted_by_id: str) -> ProductionEntry:
        entry = ProductionEntry(
            date=self.date, line=self.line, shift=self.shift, hour=self.hour,
            status=PENDING, submitted_by_id=submitted_by_id
        )
        return self.apply_to(entry)


class ReviewAction(BaseModel):
    """Model for supervisor approve/reject requests"""
    model_config = ConfigDict(populate_by_name=True)

    status: str
    rejection_reason: Optional[str] = Field(None, alias='rejectionReason')


def _load_entry_for(entry_id: str, user: User) -> ProductionEntry:
    """Entry visible to `user`; team leaders only see their own"""
    entry = get_entry(entry_id)
    if entry is None:
        raise HTTPException(status_code=404, detail="Entry not found")
    if user.role == TEAM_LEADER and entry.submitted_by_id != user.id:
        raise HTTPException(status_code=403, detail="Unauthorized")
    return entry


@router.get("/api/entries", response_class=JSONResponse)
async def list_entries(
    status: Optional[str] = Query(None),
    user: User = Depends(get_current_user)
):
    """List entries; team leaders get only their own submissions"""
    try:
        submitted_by_id = user.id if user.role == TEAM_LEADER else None
        entries = fetch_entries(status=status, submitted_by_id=submitted_by_id)
        return [entry.to_dict() for entry in entries]
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error fetching entries: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to fetch entries")


@router.post("/api/entries", response_class=JSONResponse)
async def submit_entry(
    payload: EntryPayload,
    user: User = Depends(require_roles(TEAM_LEADER))
):
    """Record a new hourly entry awaiting approval"""
    try:
        if find_entry_for_slot(payload.date, payload.shift, payload.line, payload.hour):
            raise HTTPException(
                status_code=400,
                detail="Entry already exists for this date, shift, line, and hour"
            )

        entry = create_entry(payload.to_entry(submitted_by_id=user.id))
        return entry.to_dict()
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Entry creation error: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to create entry")


@router.get("/api/entries/shift-data", response_class=JSONResponse)
async def get_shift_data(
    date: Optional[str] = Query(None),
    shift: Optional[str] = Query(None),
    line: Optional[str] = Query(None),
    user: User = Depends(get_current_user)
):
    """Shift context (line and operators) from the first entry of a shift"""
    if not date or not shift or not line:
        raise HTTPException(status_code=400, detail="Missing parameters")

    try:
        first_entry = get_first_shift_entry(date, shift, line)
        if first_entry is None:
            return None
        return {
            "date": date_key(first_entry.date),
            "line": first_entry.line,
            "operatorNames": first_entry.operator_names
        }
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to fetch shift data: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch shift data")


@router.get("/api/entries/{entry_id}", response_class=JSONResponse)
async def read_entry(entry_id: str, user: User = Depends(get_current_user)):
    try:
        return _load_entry_for(entry_id, user).to_dict()
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error fetching entry {entry_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch entry")


@router.get("/api/entries/{entry_id}/metrics", response_class=JSONResponse)
async def read_entry_metrics(entry_id: str, user: User = Depends(get_current_user)):
    """OEE and derived metrics for a single entry"""
    try:
        return entry_metrics(_load_entry_for(entry_id, user))
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error computing metrics for entry {entry_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to compute entry metrics")


@router.put("/api/entries/{entry_id}", response_class=JSONResponse)
async def edit_entry(
    entry_id: str,
    payload: EntryPayload,
    user: User = Depends(require_roles(TEAM_LEADER))
):
    """Edit an entry; only the owner, and only while pending"""
    try:
        entry = get_entry(entry_id)
        if entry is None:
            raise HTTPException(status_code=404, detail="Entry not found")
        if entry.submitted_by_id != user.id:
            raise HTTPException(status_code=403, detail="Unauthorized")
        if entry.status != PENDING:
            raise HTTPException(status_code=400, detail="Can only edit pending entries")

        return update_entry(payload.apply_to(entry)).to_dict()
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Entry update error: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to update entry")


@router.delete("/api/entries/{entry_id}", response_class=JSONResponse)
async def remove_entry(entry_id: str, user: User = Depends(get_current_user)):
    """Delete an entry; team leaders may only delete their own pending entries"""
    try:
        entry = _load_entry_for(entry_id, user)
        if user.role == TEAM_LEADER and entry.status != PENDING:
            raise HTTPException(status_code=400, detail="Can only delete pending entries")

        delete_entry(entry_id)
        return {"message": "Entry deleted successfully"}
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Entry deletion error: {e}")
        raise HTTPException(status_code=500, detail="Failed to delete entry")


@router.patch("/api/entries/{entry_id}/approve", response_class=JSONResponse)
async def review_entry(
    entry_id: str,
    action: ReviewAction,
    user: User = Depends(require_roles(SUPERVISOR))
):
    """
    Approve or reject a pending entry.

    Expected statuses:
    - 'APPROVED'
    - 'REJECTED' (requires a non-blank rejectionReason)
    """
    try:
        entry = get_entry(entry_id)
        if entry is None:
            raise HTTPException(status_code=404, detail="Entry not found")
        if entry.status != PENDING:
            raise HTTPException(status_code=400, detail="Entry has already been processed")
        if action.status not in (APPROVED, REJECTED):
            raise HTTPException(status_code=400, detail="Invalid status. Must be APPROVED or REJECTED")

        reason = (action.rejection_reason or '').strip()
        if action.status == REJECTED and not reason:
            raise HTTPException(status_code=400, detail="Rejection reason is required when rejecting an entry")

        updated = set_entry_status(
            entry_id,
            action.status,
            approved_by_id=user.id,
            rejection_reason=reason if action.status == REJECTED else None
        )
        return updated.to_dict()
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Entry approval error: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to update entry status")
