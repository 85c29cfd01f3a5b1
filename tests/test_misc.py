"""Tests for the small formatting/parsing helpers and clock arithmetic.

Covers: rt.util.misc, rt.core.clock, rt.core.alerts
"""

import unittest
from datetime import datetime, timedelta, timezone


class TestFormatting(unittest.TestCase):

    def test_format_clock(self):
        from rt.util.misc import format_clock
        self.assertEqual(format_clock(0), "00:00:00")
        self.assertEqual(format_clock(3725), "01:02:05")
        self.assertEqual(format_clock(-90), "-00:01:30")
        self.assertEqual(format_clock(100 * 3600), "100:00:00")

    def test_format_duration(self):
        from rt.util.misc import format_duration
        self.assertEqual(format_duration(5400), "1h 30m")
        self.assertEqual(format_duration(59), "0h 0m")
        self.assertEqual(format_duration(-10), "0h 0m")

    def test_format_money(self):
        from rt.util.misc import format_money
        self.assertEqual(format_money(35.75), "35.75")
        self.assertEqual(format_money(0), "0.00")

    def test_now_iso_returns_aware_datetime(self):
        from rt.util.misc import now_iso
        self.assertIsNotNone(datetime.fromisoformat(now_iso()).tzinfo)


class TestParsing(unittest.TestCase):

    def test_parse_rate(self):
        from rt.util.misc import parse_rate
        self.assertEqual(parse_rate("50"), 50.0)
        self.assertEqual(parse_rate(" 12.5 "), 12.5)
        self.assertEqual(parse_rate("0"), 0.0)
        for bad in (None, "", "  ", "abc", "-5", "nan", "inf"):
            with self.subTest(text=bad):
                self.assertIsNone(parse_rate(bad))

    def test_parse_minutes(self):
        from rt.util.misc import parse_minutes
        self.assertEqual(parse_minutes("60"), 60)
        self.assertEqual(parse_minutes(" 5 "), 5)
        self.assertEqual(parse_minutes("0"), 0)
        self.assertEqual(parse_minutes("-3"), -3)
        self.assertEqual(parse_minutes("12.5"), 12)
        self.assertEqual(parse_minutes("90abc"), 90)
        self.assertEqual(parse_minutes("+4"), 4)
        for bad in (None, "", "abc", ".5", "min 30"):
            with self.subTest(text=bad):
                self.assertIsNone(parse_minutes(bad))


class TestClock(unittest.TestCase):

    def test_system_clock_is_aware(self):
        from rt.core.clock import system_clock
        self.assertIsNotNone(system_clock().tzinfo)

    def test_seconds_between_floors(self):
        from rt.core.clock import seconds_between
        start = datetime(2026, 1, 1, tzinfo=timezone.utc)
        self.assertEqual(seconds_between(start, start + timedelta(seconds=59.999)), 59)
        self.assertEqual(seconds_between(start, start + timedelta(hours=1)), 3600)
        self.assertEqual(seconds_between(start, start - timedelta(seconds=0.5)), -1)


class TestAlertDispatch(unittest.TestCase):

    def test_failures_are_swallowed(self):
        from rt.core.alerts import dispatch_cue, dispatch_expired
        from support import FailingAlerts
        dispatch_cue(FailingAlerts(), "alarm")
        dispatch_expired(FailingAlerts(), "STATION 01")

    def test_base_sink_is_silent(self):
        from rt.core.alerts import AlertSink, CUE_KINDS
        sink = AlertSink()
        for kind in CUE_KINDS:
            sink.cue(kind)
        sink.notify_expired("STATION 01")


if __name__ == "__main__":
    unittest.main()
