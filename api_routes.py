# oee_tracker/api_routes.py
"""API route handlers for analytics, administration and reference data"""
from fastapi import APIRouter, Depends, Query, HTTPException
from fastapi.responses import JSONResponse, StreamingResponse
from pydantic import BaseModel
from typing import Optional
from datetime import datetime
import logging
import csv
import io

from analytics import build_analytics, entry_oee
from auth import get_current_user, hash_password, require_roles
from models import User, USER_ROLES, PENDING, APPROVED, REJECTED, SUPERVISOR, ADMIN
from oee import get_oee_category
from services import (
    fetch_entries, count_entries_by_status, count_users, fetch_users,
    get_user_by_email, create_user, update_user, fetch_parameters, ping_database
)
from shifts import get_shift_info
from utils import parse_date_parameters, date_key

logger = logging.getLogger(__name__)
router = APIRouter()


class NewUser(BaseModel):
    name: str
    email: str
    role: str
    password: str


class UserUpdate(BaseModel):
    id: str
    name: str
    email: str
    role: str
    password: Optional[str] = None


@router.get("/api/analytics", response_class=JSONResponse)
async def get_analytics(user: User = Depends(require_roles(SUPERVISOR, ADMIN))):
    """Supervisor dashboard analytics"""
    try:
        entries = fetch_entries()
        return build_analytics(entries)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Analytics error: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Failed to fetch analytics")


@router.get("/api/admin/stats", response_class=JSONResponse)
async def get_admin_stats(user: User = Depends(require_roles(ADMIN))):
    try:
        total_entries, status_counts = count_entries_by_status()
        return {
            "totalUsers": count_users(),
            "totalEntries": total_entries,
            "pendingEntries": status_counts.get(PENDING, 0),
            "approvedEntries": status_counts.get(APPROVED, 0),
            "rejectedEntries": status_counts.get(REJECTED, 0),
            "systemHealth": "Good"
        }
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Admin stats error: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch admin stats")


@router.get("/api/users", response_class=JSONResponse)
async def list_users(user: User = Depends(require_roles(ADMIN))):
    try:
        return [u.to_dict() for u in fetch_users()]
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error fetching users: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch users")


@router.post("/api/users", response_class=JSONResponse)
def add_user(new_user: NewUser, user: User = Depends(require_roles(ADMIN))):
    try:
        if new_user.role not in USER_ROLES:
            raise HTTPException(status_code=400, detail="Invalid role")
        if get_user_by_email(new_user.email):
            raise HTTPException(status_code=400, detail="Email already exists")

        created = create_user(
            new_user.name, new_user.email, new_user.role, hash_password(new_user.password)
        )
        return created.to_dict()
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error creating user: {e}")
        raise HTTPException(status_code=500, detail="Failed to create user")


@router.put("/api/users", response_class=JSONResponse)
def edit_user(changes: UserUpdate, user: User = Depends(require_roles(ADMIN))):
    """Update a user; the password is only changed when given"""
    try:
        if changes.role not in USER_ROLES:
            raise HTTPException(status_code=400, detail="Invalid role")

        password_hash = hash_password(changes.password) if changes.password else None
        updated = update_user(changes.id, changes.name, changes.email, changes.role, password_hash)
        if updated is None:
            raise HTTPException(status_code=404, detail="User not found")
        return updated.to_dict()
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error updating user: {e}")
        raise HTTPException(status_code=500, detail="Failed to update user")


@router.get("/api/parameters", response_class=JSONResponse)
async def get_parameters(
    type: Optional[str] = Query(None),
    user: User = Depends(get_current_user)
):
    """Form dropdown values, for one type or all of them"""
    try:
        parameters = fetch_parameters(type)
        if type:
            return parameters.get(type, [])
        return parameters
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error fetching parameters: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch parameters")


@router.get("/api/shifts/current", response_class=JSONResponse)
async def current_shift(user: User = Depends(get_current_user)):
    return get_shift_info()


@router.get("/api/download_csv", response_class=StreamingResponse)
async def download_csv(
    date: Optional[str] = Query(None),
    week: Optional[str] = Query(None),
    month: Optional[str] = Query(None),
    start_date: Optional[str] = Query(None),
    end_date: Optional[str] = Query(None),
    status: Optional[str] = Query(None),
    user: User = Depends(require_roles(SUPERVISOR, ADMIN))
):
    """Download entries with their OEE as CSV"""
    try:
        range_start, range_end = parse_date_parameters(date, week, month, start_date, end_date)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Invalid date selection: {e}")

    try:
        entries = fetch_entries(status=status, start_date=range_start, end_date=range_end)

        output = io.StringIO()
        writer = csv.writer(output)
        writer.writerow(['Date', 'Line', 'Shift', 'Hour', 'Model', 'Available Time', 'Loss Time',
                         'Line Capacity', 'Good Parts', 'Rejects', 'Availability(%)',
                         'Performance(%)', 'Quality(%)', 'OEE(%)', 'Category', 'Status'])

        for entry in entries:
            result = entry_oee(entry)
            writer.writerow([
                date_key(entry.date),
                entry.line,
                entry.shift,
                entry.hour,
                entry.model,
                entry.available_time,
                entry.loss_time,
                entry.line_capacity,
                entry.total_good_parts,
                entry.total_rejects,
                f"{result.availability:.2f}",
                f"{result.performance:.2f}",
                f"{result.quality:.2f}",
                f"{result.oee:.2f}",
                get_oee_category(result.oee).category,
                entry.status
            ])

        output.seek(0)
        period = f"{range_start}_{range_end}" if range_start else "all"
        filename = f"oee_entries_{period}_{status or 'all'}.csv"

        return StreamingResponse(
            iter([output.getvalue()]),
            media_type="text/csv",
            headers={'Content-Disposition': f'attachment; filename="{filename}"'}
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"CSV error: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/health")
async def health_check():
    """Health check endpoint"""
    try:
        ping_database()
        shift = get_shift_info()
        return {
            "status": "healthy",
            "timestamp": datetime.now().isoformat(),
            "database": "connected",
            "shift": {
                "current": shift["currentShift"],
                "hour": shift["currentHour"]
            }
        }
    except Exception as e:
        logger.error(f"Health check failed: {e}")
        raise HTTPException(status_code=503, detail="Service unhealthy")
