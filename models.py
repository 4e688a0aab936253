"""Data models for OEE Tracker"""
from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any
from datetime import date, datetime
import json

from utils import parse_int, date_key

PENDING = 'PENDING'
APPROVED = 'APPROVED'
REJECTED = 'REJECTED'
ENTRY_STATUSES = (PENDING, APPROVED, REJECTED)

TEAM_LEADER = 'TEAM_LEADER'
SUPERVISOR = 'SUPERVISOR'
ADMIN = 'ADMIN'
USER_ROLES = (TEAM_LEADER, SUPERVISOR, ADMIN)

BOTH_SIDES = 'BOTH'

# 4M change management: man, machine, material, method.
# Column name -> API key
FOUR_M_FIELDS = {
    f"{category}_{suffix}": f"{category}{label}"
    for category in ('man', 'machine', 'material', 'method')
    for suffix, label in (
        ('change', 'Change'), ('reason', 'Reason'), ('cc', 'CC'), ('sc', 'SC'), ('general', 'General')
    )
}


def _side_total(whole: Optional[int], lh: Optional[int], rh: Optional[int], production_type: Optional[str]) -> int:
    if production_type == BOTH_SIDES:
        return (lh or 0) + (rh or 0)
    return whole or 0


def _json_list(value: Any) -> list:
    if value is None:
        return []
    if isinstance(value, (str, bytes)):
        return json.loads(value) if value else []
    return list(value)


@dataclass
class User:
    """Application user"""
    id: str
    name: str
    email: str
    role: str
    password_hash: str = ''
    created_at: Optional[datetime] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> 'User':
        return cls(
            id=row['id'],
            name=row['name'],
            email=row['email'],
            role=row['role'],
            password_hash=row.get('password_hash') or '',
            created_at=row.get('created_at')
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'email': self.email,
            'role': self.role,
            'createdAt': self.created_at.isoformat() if self.created_at else None
        }


@dataclass
class ProductionEntry:
    """One hour-slot production record for a line and shift"""
    date: date
    line: str
    shift: str
    hour: str
    model: str = ''
    id: Optional[str] = None
    team_leader: str = ''
    shift_in_charge: str = ''
    operator_names: List[str] = field(default_factory=list)
    station_names: List[str] = field(default_factory=list)
    available_time: int = 0
    line_capacity: int = 0
    loss_time: int = 0
    production_type: Optional[str] = None
    ppc_target: Optional[int] = None
    ppc_target_lh: Optional[int] = None
    ppc_target_rh: Optional[int] = None
    good_parts: Optional[int] = None
    good_parts_lh: Optional[int] = None
    good_parts_rh: Optional[int] = None
    rejects: Optional[int] = None
    rejects_lh: Optional[int] = None
    rejects_rh: Optional[int] = None
    spd_parts: Optional[int] = None
    spd_parts_lh: Optional[int] = None
    spd_parts_rh: Optional[int] = None
    problem_head: str = ''
    description: str = ''
    responsibility: str = ''
    defect_type: Optional[str] = None
    new_defect_description: Optional[str] = None
    new_defect_corrective_action: Optional[str] = None
    rejection_details: List[Dict[str, Any]] = field(default_factory=list)
    has_4m_change: bool = False
    man_change: Optional[bool] = None
    man_reason: Optional[str] = None
    man_cc: Optional[str] = None
    man_sc: Optional[str] = None
    man_general: Optional[str] = None
    machine_change: Optional[bool] = None
    machine_reason: Optional[str] = None
    machine_cc: Optional[str] = None
    machine_sc: Optional[str] = None
    machine_general: Optional[str] = None
    material_change: Optional[bool] = None
    material_reason: Optional[str] = None
    material_cc: Optional[str] = None
    material_sc: Optional[str] = None
    material_general: Optional[str] = None
    method_change: Optional[bool] = None
    method_reason: Optional[str] = None
    method_cc: Optional[str] = None
    method_sc: Optional[str] = None
    method_general: Optional[str] = None
    status: str = PENDING
    rejection_reason: Optional[str] = None
    submitted_by_id: Optional[str] = None
    approved_by_id: Optional[str] = None
    submitted_by: Optional[Dict[str, str]] = None
    approved_by: Optional[Dict[str, str]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def total_good_parts(self) -> int:
        return _side_total(self.good_parts, self.good_parts_lh, self.good_parts_rh, self.production_type)

    @property
    def total_rejects(self) -> int:
        return _side_total(self.rejects, self.rejects_lh, self.rejects_rh, self.production_type)

    @property
    def total_target(self) -> int:
        return _side_total(self.ppc_target, self.ppc_target_lh, self.ppc_target_rh, self.production_type)

    @property
    def total_spd_parts(self) -> int:
        return _side_total(self.spd_parts, self.spd_parts_lh, self.spd_parts_rh, self.production_type)

    @property
    def total_production(self) -> int:
        return self.total_good_parts + self.total_spd_parts + self.total_rejects

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> 'ProductionEntry':
        """Build an entry from a dictionary cursor row joined with user names"""
        entry_date = row['date']
        if isinstance(entry_date, datetime):
            entry_date = entry_date.date()

        submitted_by = None
        if row.get('submitted_by_name') is not None:
            submitted_by = {'name': row['submitted_by_name'], 'email': row.get('submitted_by_email')}
        approved_by = None
        if row.get('approved_by_name') is not None:
            approved_by = {'name': row['approved_by_name'], 'email': row.get('approved_by_email')}

        # TINYINT flags come back as 0/1
        four_m = {column: row.get(column) for column in FOUR_M_FIELDS}
        for column in four_m:
            if column.endswith('_change') and four_m[column] is not None:
                four_m[column] = bool(four_m[column])

        return cls(
            id=row['id'],
            date=entry_date,
            line=row['line'],
            shift=row['shift'],
            hour=row['hour'],
            model=row.get('model') or '',
            team_leader=row.get('team_leader') or '',
            shift_in_charge=row.get('shift_in_charge') or '',
            operator_names=_json_list(row.get('operator_names')),
            station_names=_json_list(row.get('station_names')),
            # Stored as text, e.g. "480"
            available_time=parse_int(row.get('available_time')),
            line_capacity=parse_int(row.get('line_capacity')),
            loss_time=row.get('loss_time') or 0,
            production_type=row.get('production_type'),
            ppc_target=row.get('ppc_target'),
            ppc_target_lh=row.get('ppc_target_lh'),
            ppc_target_rh=row.get('ppc_target_rh'),
            good_parts=row.get('good_parts'),
            good_parts_lh=row.get('good_parts_lh'),
            good_parts_rh=row.get('good_parts_rh'),
            rejects=row.get('rejects'),
            rejects_lh=row.get('rejects_lh'),
            rejects_rh=row.get('rejects_rh'),
            spd_parts=row.get('spd_parts'),
            spd_parts_lh=row.get('spd_parts_lh'),
            spd_parts_rh=row.get('spd_parts_rh'),
            problem_head=row.get('problem_head') or '',
            description=row.get('description') or '',
            responsibility=row.get('responsibility') or '',
            defect_type=row.get('defect_type'),
            new_defect_description=row.get('new_defect_description'),
            new_defect_corrective_action=row.get('new_defect_corrective_action'),
            rejection_details=_json_list(row.get('rejection_details')),
            has_4m_change=bool(row.get('has_4m_change')),
            **four_m,
            status=row['status'],
            rejection_reason=row.get('rejection_reason'),
            submitted_by_id=row.get('submitted_by_id'),
            approved_by_id=row.get('approved_by_id'),
            submitted_by=submitted_by,
            approved_by=approved_by,
            created_at=row.get('created_at'),
            updated_at=row.get('updated_at')
        )

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'id': self.id,
            'date': date_key(self.date),
            'line': self.line,
            'shift': self.shift,
            'hour': self.hour,
            'model': self.model,
            'teamLeader': self.team_leader,
            'shiftInCharge': self.shift_in_charge,
            'operatorNames': self.operator_names,
            'stationNames': self.station_names,
            'availableTime': self.available_time,
            'lineCapacity': self.line_capacity,
            'lossTime': self.loss_time,
            'productionType': self.production_type,
            'ppcTarget': self.ppc_target,
            'ppcTargetLH': self.ppc_target_lh,
            'ppcTargetRH': self.ppc_target_rh,
            'goodParts': self.good_parts,
            'goodPartsLH': self.good_parts_lh,
            'goodPartsRH': self.good_parts_rh,
            'rejects': self.rejects,
            'rejectsLH': self.rejects_lh,
            'rejectsRH': self.rejects_rh,
            'spdParts': self.spd_parts,
            'spdPartsLH': self.spd_parts_lh,
            'spdPartsRH': self.spd_parts_rh,
            'problemHead': self.problem_head,
            'description': self.description,
            'responsibility': self.responsibility,
            'defectType': self.defect_type,
            'newDefectDescription': self.new_defect_description,
            'newDefectCorrectiveAction': self.new_defect_corrective_action,
            'rejectionDetails': self.rejection_details,
            'has4MChange': self.has_4m_change,
            'status': self.status,
            'rejectionReason': self.rejection_reason,
            'submittedBy': self.submitted_by,
            'approvedBy': self.approved_by,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None
        }
        for column, key in FOUR_M_FIELDS.items():
            data[key] = getattr(self, column)
        return data
