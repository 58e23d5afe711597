from datetime import time

from src.staff_ledger.staff_ledger.attendance.factory import AttendanceStrategyFactory
from src.staff_ledger.staff_ledger.attendance.strategies.half_day_strategy import HalfDayStrategy
from src.staff_ledger.staff_ledger.attendance.strategies.invalid_strategy import InvalidStrategy
from src.staff_ledger.staff_ledger.attendance.strategies.late_strategy import LateStrategy
from src.staff_ledger.staff_ledger.attendance.strategies.normal_strategy import NormalStrategy
from src.staff_ledger.staff_ledger.core.enums import AttendanceStatus


def test_factory_clock_in_at_threshold_is_on_time():
    factory = AttendanceStrategyFactory()
    assert isinstance(factory.for_clock_in(clock_in=time(9, 15, 0)), NormalStrategy)


def test_factory_clock_in_after_threshold_is_late():
    factory = AttendanceStrategyFactory()
    assert isinstance(factory.for_clock_in(clock_in=time(9, 15, 1)), LateStrategy)


def test_factory_clock_out_keeps_late():
    factory = AttendanceStrategyFactory()
    strategy = factory.for_clock_out(hours_worked=8, current_status=AttendanceStatus.LATE)
    assert isinstance(strategy, LateStrategy)
    assert strategy.decide_clock_out(hours_worked=8, current=AttendanceStatus.LATE).status == AttendanceStatus.LATE


def test_factory_clock_out_short_day_is_half_day():
    factory = AttendanceStrategyFactory()
    assert isinstance(factory.for_clock_out(hours_worked=3.99, current_status=AttendanceStatus.IN_PROGRESS), HalfDayStrategy)


def test_factory_clock_out_zero_hours_is_invalid():
    factory = AttendanceStrategyFactory()
    assert isinstance(factory.for_clock_out(hours_worked=0, current_status=AttendanceStatus.IN_PROGRESS), InvalidStrategy)


def test_decide_day():
    factory = AttendanceStrategyFactory()
    assert factory.decide_day(clock_in=None, clock_out=None) == (AttendanceStatus.ABSENT, 0.0)
    assert factory.decide_day(clock_in=time(9, 0), clock_out=None) == (AttendanceStatus.IN_PROGRESS, 0.0)
    assert factory.decide_day(clock_in=time(9, 20), clock_out=time(17, 0)) == (AttendanceStatus.LATE, 7.67)
    assert factory.decide_day(clock_in=time(9, 0), clock_out=time(11, 0)) == (AttendanceStatus.HALF_DAY, 2.0)
