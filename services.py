"""Data access services for entries, users and form parameters"""
from typing import Optional, List, Dict, Any, Tuple
from datetime import date, datetime
from uuid import uuid4
import json
import logging

from models import ProductionEntry, User, FOUR_M_FIELDS
from database import get_db_connection

logger = logging.getLogger(__name__)

ENTRY_SELECT = """
    SELECT
        e.*,
        s.name AS submitted_by_name, s.email AS submitted_by_email,
        a.name AS approved_by_name, a.email AS approved_by_email
    FROM entries e
    LEFT JOIN users s ON s.id = e.submitted_by_id
    LEFT JOIN users a ON a.id = e.approved_by_id
"""

# Columns written on create and on edit by the team leader
ENTRY_COLUMNS = [
    'date', 'line', 'shift', 'hour', 'model', 'team_leader', 'shift_in_charge',
    'operator_names', 'station_names', 'available_time', 'line_capacity', 'loss_time',
    'production_type', 'ppc_target', 'ppc_target_lh', 'ppc_target_rh',
    'good_parts', 'good_parts_lh', 'good_parts_rh', 'rejects', 'rejects_lh', 'rejects_rh',
    'spd_parts', 'spd_parts_lh', 'spd_parts_rh',
    'problem_head', 'description', 'responsibility', 'defect_type',
    'new_defect_description', 'new_defect_corrective_action', 'rejection_details',
    'has_4m_change'
] + list(FOUR_M_FIELDS)

JSON_COLUMNS = {'operator_names', 'station_names', 'rejection_details'}

USER_COLUMNS = "id, name, email, role, password_hash, created_at"


def _entry_values(entry: ProductionEntry) -> List[Any]:
    values = []
    for column in ENTRY_COLUMNS:
        value = getattr(entry, column)
        if column in JSON_COLUMNS:
            value = json.dumps(value)
        elif column in ('available_time', 'line_capacity'):
            value = str(value)
        values.append(value)
    return values


def fetch_entries(
    status: Optional[str] = None,
    submitted_by_id: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None
) -> List[ProductionEntry]:
    """Fetch entries, newest first, with optional filters"""
    clauses, params = [], []
    if status:
        clauses.append("e.status = %s")
        params.append(status)
    if submitted_by_id:
        clauses.append("e.submitted_by_id = %s")
        params.append(submitted_by_id)
    if start_date and end_date:
        clauses.append("e.date BETWEEN %s AND %s")
        params.extend([start_date, end_date])

    query = ENTRY_SELECT
    if clauses:
        query += " WHERE " + " AND ".join(clauses)
    query += " ORDER BY e.created_at DESC"

    with get_db_connection(dictionary=True) as cursor:
        cursor.execute(query, tuple(params))
        entries = [ProductionEntry.from_row(row) for row in cursor.fetchall()]

    logger.info(f"Fetched {len(entries)} entries (status={status}, submitted_by={submitted_by_id})")
    return entries


def get_entry(entry_id: str) -> Optional[ProductionEntry]:
    with get_db_connection(dictionary=True) as cursor:
        cursor.execute(ENTRY_SELECT + " WHERE e.id = %s", (entry_id,))
        row = cursor.fetchone()
        return ProductionEntry.from_row(row) if row else None


def find_entry_for_slot(entry_date: date, shift: str, line: str, hour: str) -> Optional[ProductionEntry]:
    """Existing entry for the same date/shift/line/hour, if any"""
    with get_db_connection(dictionary=True) as cursor:
        cursor.execute(
            ENTRY_SELECT + " WHERE e.date = %s AND e.shift = %s AND e.line = %s AND e.hour = %s LIMIT 1",
            (entry_date, shift, line, hour)
        )
        row = cursor.fetchone()
        return ProductionEntry.from_row(row) if row else None


def get_first_shift_entry(entry_date: date, shift: str, line: str) -> Optional[ProductionEntry]:
    """Earliest entry recorded for a shift context"""
    with get_db_connection(dictionary=True) as cursor:
        cursor.execute(
            ENTRY_SELECT + " WHERE e.date = %s AND e.shift = %s AND e.line = %s ORDER BY e.created_at ASC LIMIT 1",
            (entry_date, shift, line)
        )
        row = cursor.fetchone()
        return ProductionEntry.from_row(row) if row else None


def create_entry(entry: ProductionEntry) -> ProductionEntry:
    entry.id = uuid4().hex
    entry.created_at = entry.updated_at = datetime.now()

    columns = ['id'] + ENTRY_COLUMNS + ['status', 'submitted_by_id', 'created_at', 'updated_at']
    placeholders = ', '.join(['%s'] * len(columns))
    values = [entry.id] + _entry_values(entry) + [
        entry.status, entry.submitted_by_id, entry.created_at, entry.updated_at
    ]

    with get_db_connection() as cursor:
        cursor.execute(
            f"INSERT INTO entries ({', '.join(columns)}) VALUES ({placeholders})",
            tuple(values)
        )

    logger.info(f"Entry {entry.id} created for {entry.line}/{entry.shift} {entry.hour} on {entry.date}")
    return get_entry(entry.id)


def update_entry(entry: ProductionEntry) -> ProductionEntry:
    """Persist the editable fields of an existing entry"""
    assignments = ', '.join(f"{column} = %s" for column in ENTRY_COLUMNS)
    with get_db_connection() as cursor:
        cursor.execute(
            f"UPDATE entries SET {assignments}, updated_at = %s WHERE id = %s",
            tuple(_entry_values(entry) + [datetime.now(), entry.id])
        )

    logger.info(f"Entry {entry.id} updated")
    return get_entry(entry.id)


def set_entry_status(
    entry_id: str,
    status: str,
    approved_by_id: str,
    rejection_reason: Optional[str] = None
) -> ProductionEntry:
    """Record a supervisor decision on a pending entry"""
    with get_db_connection() as cursor:
        cursor.execute("""
            UPDATE entries
            SET status = %s, approved_by_id = %s, rejection_reason = %s, updated_at = %s
            WHERE id = %s AND status = 'PENDING'
        """, (status, approved_by_id, rejection_reason, datetime.now(), entry_id))

    logger.info(f"Entry {entry_id} marked {status} by {approved_by_id}")
    return get_entry(entry_id)


def delete_entry(entry_id: str):
    with get_db_connection() as cursor:
        cursor.execute("DELETE FROM entries WHERE id = %s", (entry_id,))
    logger.info(f"Entry {entry_id} deleted")


def count_entries_by_status() -> Tuple[int, Dict[str, int]]:
    """Total entry count and counts per status"""
    with get_db_connection() as cursor:
        cursor.execute("SELECT status, COUNT(*) FROM entries GROUP BY status")
        counts = {status: count for status, count in cursor.fetchall()}
    return sum(counts.values()), counts


def fetch_users() -> List[User]:
    with get_db_connection(dictionary=True) as cursor:
        cursor.execute(f"SELECT {USER_COLUMNS} FROM users ORDER BY created_at DESC")
        return [User.from_row(row) for row in cursor.fetchall()]


def count_users() -> int:
    with get_db_connection() as cursor:
        cursor.execute("SELECT COUNT(*) FROM users")
        return cursor.fetchone()[0]


def get_user_by_id(user_id: Optional[str]) -> Optional[User]:
    if not user_id:
        return None
    with get_db_connection(dictionary=True) as cursor:
        cursor.execute(f"SELECT {USER_COLUMNS} FROM users WHERE id = %s LIMIT 1", (user_id,))
        row = cursor.fetchone()
        return User.from_row(row) if row else None


def get_user_by_email(email: str) -> Optional[User]:
    with get_db_connection(dictionary=True) as cursor:
        cursor.execute(f"SELECT {USER_COLUMNS} FROM users WHERE email = %s LIMIT 1", (email,))
        row = cursor.fetchone()
        return User.from_row(row) if row else None


def create_user(name: str, email: str, role: str, password_hash: str) -> User:
    user = User(
        id=uuid4().hex,
        name=name,
        email=email,
        role=role,
        password_hash=password_hash,
        created_at=datetime.now()
    )
    with get_db_connection() as cursor:
        cursor.execute(
            "INSERT INTO users (id, name, email, role, password_hash, created_at) VALUES (%s, %s, %s, %s, %s, %s)",
            (user.id, user.name, user.email, user.role, user.password_hash, user.created_at)
        )
    logger.info(f"User {email} created with role {role}")
    return user


def update_user(user_id: str, name: str, email: str, role: str, password_hash: Optional[str] = None) -> Optional[User]:
    assignments = ["name = %s", "email = %s", "role = %s"]
    params: List[Any] = [name, email, role]
    if password_hash:
        assignments.append("password_hash = %s")
        params.append(password_hash)
    params.append(user_id)

    with get_db_connection() as cursor:
        cursor.execute(f"UPDATE users SET {', '.join(assignments)} WHERE id = %s", tuple(params))
    logger.info(f"User {user_id} updated")
    return get_user_by_id(user_id)


def fetch_parameters(parameter_type: Optional[str] = None) -> Dict[str, List[str]]:
    """Dropdown values keyed by parameter type"""
    with get_db_connection() as cursor:
        if parameter_type:
            cursor.execute("SELECT type, `values` FROM parameters WHERE type = %s", (parameter_type,))
        else:
            cursor.execute("SELECT type, `values` FROM parameters")
        rows = cursor.fetchall()

    return {
        param_type: json.loads(values) if isinstance(values, (str, bytes)) else list(values or [])
        for param_type, values in rows
    }


def ping_database() -> bool:
    with get_db_connection() as cursor:
        cursor.execute("SELECT 1")
        return cursor.fetchone() is not None
