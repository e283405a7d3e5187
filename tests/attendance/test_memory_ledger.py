from datetime import date, time

import pytest

from shift_attendance.attendance.memory_attendance_repository import InMemoryAttendanceLedger
from shift_attendance.attendance.model import AttendanceRecord
from shift_attendance.core.enums import AttendanceStatus, ShiftType
from shift_attendance.core.exceptions import Conflict, NotFound

D = date(2024, 5, 15)
MIDNIGHT = time(0, 0)


def _record(employee_id, status, shift=ShiftType.DAY, check_in=None, check_out=None, business_date=D):
    return AttendanceRecord(
        record_id=employee_id,
        employee_id=employee_id,
        business_date=business_date,
        status=status,
        shift=shift,
        check_in_time=check_in,
        check_out_time=check_out,
    )


def test_ensure_record_is_idempotent():
    ledger = InMemoryAttendanceLedger()

    assert ledger.ensure_record(7, D, shift=ShiftType.DAY) is True
    assert ledger.ensure_record(7, D, shift=ShiftType.NIGHT) is False

    record = ledger.get(7, D)
    assert record.status == AttendanceStatus.PENDING
    assert record.shift == ShiftType.DAY
    assert len(ledger.list_by_date(D)) == 1


def test_ensure_records_counts_only_new_rows():
    ledger = InMemoryAttendanceLedger()
    ledger.ensure_record(1, D)

    inserted = ledger.ensure_records(D, [(1, ShiftType.DAY), (2, ShiftType.NIGHT), (3, ShiftType.DAY)])

    assert inserted == 2
    assert [r.employee_id for r in ledger.list_by_date(D)] == [1, 2, 3]


def test_check_in_then_duplicate_conflicts():
    ledger = InMemoryAttendanceLedger()
    ledger.ensure_record(2, D)
    ledger.record_check_in(
        2, D, check_in_time=time(7, 45), status=AttendanceStatus.PRESENT, shift=ShiftType.DAY, punctuality=25
    )

    with pytest.raises(Conflict):
        ledger.record_check_in(2, D, check_in_time=time(8, 10), status=AttendanceStatus.LATE, shift=ShiftType.DAY)

    record = ledger.get(2, D)
    assert record.check_in_time == time(7, 45)
    assert record.status == AttendanceStatus.PRESENT
    assert record.punctuality == 25


def test_check_in_without_row_is_not_found():
    with pytest.raises(NotFound):
        InMemoryAttendanceLedger().record_check_in(
            2, D, check_in_time=time(7, 45), status=AttendanceStatus.PRESENT, shift=ShiftType.DAY
        )


def test_check_in_on_absent_row_conflicts():
    ledger = InMemoryAttendanceLedger([_record(2, AttendanceStatus.ABSENT, check_in=MIDNIGHT, check_out=MIDNIGHT)])

    with pytest.raises(Conflict):
        ledger.record_check_in(2, D, check_in_time=time(7, 45), status=AttendanceStatus.PRESENT, shift=ShiftType.DAY)


def test_check_out_requires_open_check_in():
    ledger = InMemoryAttendanceLedger([_record(2, AttendanceStatus.PENDING)])

    with pytest.raises(NotFound):
        ledger.record_check_out(2, D, check_out_time=time(18, 5))
    with pytest.raises(NotFound):
        ledger.record_check_out(9, D, check_out_time=time(18, 5))


def test_check_out_keeps_status_and_is_single_shot():
    ledger = InMemoryAttendanceLedger([_record(2, AttendanceStatus.PRESENT, check_in=time(7, 45))])

    ledger.record_check_out(2, D, check_out_time=time(18, 5))

    record = ledger.get(2, D)
    assert record.status == AttendanceStatus.PRESENT
    assert record.check_out_time == time(18, 5)
    with pytest.raises(NotFound):
        ledger.record_check_out(2, D, check_out_time=time(18, 10))


def test_finalize_day_rules():
    ledger = InMemoryAttendanceLedger(
        [
            _record(1, AttendanceStatus.PENDING),
            _record(2, AttendanceStatus.PRESENT, check_in=time(7, 45)),
            _record(3, AttendanceStatus.LATE, ShiftType.NIGHT, check_in=time(20, 10)),
            _record(4, AttendanceStatus.PRESENT, check_in=time(7, 40), check_out=time(18, 20)),
            _record(5, AttendanceStatus.ABSENT),
            _record(6, AttendanceStatus.ABSENT, check_in=time(9, 0)),
            _record(7, AttendanceStatus.PRESENT, ShiftType.NIGHT, check_in=time(19, 40)),
            _record(8, AttendanceStatus.PENDING, business_date=date(2024, 5, 16)),
        ]
    )

    outcome = ledger.finalize_day(D)

    assert (outcome.absent, outcome.backfilled, outcome.late) == (1, 2, 2)

    absent = ledger.get(1, D)
    assert absent.status == AttendanceStatus.ABSENT
    assert (absent.check_in_time, absent.check_out_time) == (MIDNIGHT, MIDNIGHT)

    day_open = ledger.get(2, D)
    assert day_open.status == AttendanceStatus.LATE
    assert day_open.check_out_time == time(18, 0)

    night_open = ledger.get(7, D)
    assert night_open.status == AttendanceStatus.LATE
    assert night_open.check_out_time == time(6, 0)

    # late with an open check-in is left to the auto-checkout jobs
    assert ledger.get(3, D).check_out_time is None
    assert ledger.get(4, D).status == AttendanceStatus.PRESENT

    backfilled = ledger.get(6, D)
    assert backfilled.status == AttendanceStatus.ABSENT
    assert (backfilled.check_in_time, backfilled.check_out_time) == (time(9, 0), MIDNIGHT)

    assert ledger.get(8, date(2024, 5, 16)).status == AttendanceStatus.PENDING


def test_finalize_day_is_idempotent():
    ledger = InMemoryAttendanceLedger(
        [_record(1, AttendanceStatus.PENDING), _record(2, AttendanceStatus.PRESENT, check_in=time(7, 45))]
    )
    ledger.finalize_day(D)
    first = ledger.list_by_date(D)

    again = ledger.finalize_day(D)

    assert again.total == 0
    assert ledger.list_by_date(D) == first


def test_finalize_day_honours_custom_default_checkout():
    ledger = InMemoryAttendanceLedger([_record(2, AttendanceStatus.PRESENT, check_in=time(7, 45))])

    ledger.finalize_day(D, default_checkout={ShiftType.DAY: time(17, 0)})

    assert ledger.get(2, D).check_out_time == time(17, 0)


def test_auto_checkout_closes_only_matching_shift():
    ledger = InMemoryAttendanceLedger(
        [
            _record(2, AttendanceStatus.PRESENT, check_in=time(7, 45)),
            _record(3, AttendanceStatus.LATE, ShiftType.NIGHT, check_in=time(20, 10)),
            _record(4, AttendanceStatus.LATE, check_in=time(8, 20)),
            _record(5, AttendanceStatus.PENDING),
        ]
    )

    affected = ledger.auto_checkout(D, shift=ShiftType.DAY, checkout_time=time(18, 0))

    assert affected == 2
    assert ledger.get(2, D).status == AttendanceStatus.LATE
    assert ledger.get(2, D).check_out_time == time(18, 0)
    assert ledger.get(4, D).check_out_time == time(18, 0)
    assert ledger.get(3, D).check_out_time is None
    assert ledger.get(5, D).status == AttendanceStatus.PENDING


def test_reads():
    ledger = InMemoryAttendanceLedger(
        [
            _record(2, AttendanceStatus.PRESENT, check_in=time(7, 45), business_date=date(2024, 5, 13)),
            _record(2, AttendanceStatus.LATE, check_in=time(8, 20), business_date=date(2024, 5, 14)),
            _record(3, AttendanceStatus.ABSENT, business_date=date(2024, 5, 14)),
        ]
    )

    history = ledger.list_for_employee(2, limit=1)
    assert [r.business_date for r in history] == [date(2024, 5, 14)]
    assert ledger.count_by_status(date(2024, 5, 14)) == {AttendanceStatus.LATE: 1, AttendanceStatus.ABSENT: 1}
    assert ledger.get(9, D) is None
