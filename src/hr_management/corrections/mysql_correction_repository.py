from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Optional, Sequence

from ..core.enums import CorrectionType, RequestStatus
from ..core.exceptions import ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import CorrectionApproval, CorrectionRequest
from .repository import CorrectionRepository

_REQUEST_COLUMNS = """
    r.request_id, r.employee_id, r.target_date, r.correction_type, r.reason, r.status,
    r.recorded_by, r.proposed_time, r.decided_by, r.decided_at, r.decision_note
"""


def _to_request(r: Dict[str, Any]) -> CorrectionRequest:
    return CorrectionRequest(
        request_id=int(r["request_id"]),
        employee_id=int(r["employee_id"]),
        target_date=r["target_date"],
        correction_type=CorrectionType(r["correction_type"]),
        reason=r["reason"],
        status=RequestStatus(r["status"]),
        recorded_by=r.get("recorded_by"),
        proposed_time=r.get("proposed_time"),
        decided_by=r.get("decided_by"),
        decided_at=r.get("decided_at"),
        decision_note=r.get("decision_note"),
    )


class MySQLCorrectionRepository(CorrectionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        employee_id: int,
        target_date: date,
        correction_type: CorrectionType,
        reason: str,
        recorded_by: Optional[int] = None,
        proposed_time: Optional[datetime] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_correction_requests(
                    employee_id, target_date, correction_type, reason, status, recorded_by, proposed_time
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(employee_id),
                    target_date,
                    correction_type.value,
                    reason,
                    RequestStatus.PENDING.value,
                    recorded_by,
                    proposed_time,
                ),
            )
            return int(cur.lastrowid)

    def get(self, request_id: int) -> Optional[CorrectionRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_REQUEST_COLUMNS} FROM attendance_correction_requests r WHERE r.request_id=%s",
                (int(request_id),),
            )
            r = fetchone(cur)
            return _to_request(r) if r else None

    def list_pending(self, *, manager_id: Optional[int] = None, limit: int = 200) -> Sequence[CorrectionRequest]:
        clauses = ["r.status=%s"]
        params: list[object] = [RequestStatus.PENDING.value]

        if manager_id is not None:
            clauses.append("e.manager_id=%s")
            params.append(int(manager_id))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_REQUEST_COLUMNS}
                FROM attendance_correction_requests r
                JOIN employees e ON e.employee_id = r.employee_id
                WHERE {where}
                ORDER BY r.target_date DESC, r.request_id DESC
                LIMIT %s
                """,
                tuple(params + [int(limit)]),
            )
            return [_to_request(r) for r in fetchall(cur)]

    def apply_approval(self, approval: CorrectionApproval) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_correction_requests
                SET status=%s, decided_by=%s, decided_at=NOW()
                WHERE request_id=%s AND status=%s
                """,
                (
                    RequestStatus.APPROVED.value,
                    int(approval.approver_id),
                    int(approval.request_id),
                    RequestStatus.PENDING.value,
                ),
            )
            if cur.rowcount == 0:
                raise ValidationError("Request was already decided")

            if approval.touches_attendance and approval.corrects_exit:
                cur.execute(
                    """
                    UPDATE attendance
                    SET exit_time=%s,
                        duration_hours=TIMESTAMPDIFF(SECOND, entry_time, %s) / 3600
                    WHERE attendance_id=%s
                    """,
                    (approval.corrected_time, approval.corrected_time, int(approval.attendance_id)),
                )
            elif approval.touches_attendance:
                cur.execute(
                    """
                    UPDATE attendance
                    SET entry_time=%s,
                        duration_hours=CASE
                            WHEN exit_time IS NULL THEN NULL
                            ELSE TIMESTAMPDIFF(SECOND, %s, exit_time) / 3600
                        END
                    WHERE attendance_id=%s
                    """,
                    (approval.corrected_time, approval.corrected_time, int(approval.attendance_id)),
                )

            if approval.attendance_id is not None:
                cur.execute(
                    """
                    INSERT INTO attendance_logs(attendance_id, actor, logged_at, reason)
                    VALUES(%s,%s,NOW(),%s)
                    """,
                    (int(approval.attendance_id), approval.actor, approval.log_reason),
                )

    def reject(self, *, request_id: int, decided_by: int, reason: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_correction_requests
                SET status=%s, decision_note=%s, decided_by=%s, decided_at=NOW()
                WHERE request_id=%s AND status=%s
                """,
                (
                    RequestStatus.REJECTED.value,
                    reason,
                    int(decided_by),
                    int(request_id),
                    RequestStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0
