import unittest

from ccstatus.date_utils import calculate_elapsed, parse_timestamp_seconds


class ParseTimestampTests(unittest.TestCase):
    def test_uses_fixed_length_months(self) -> None:
        expected = ((2026 - 1970) * 365 + 2 * 30 + 16) * 86400 + 10 * 3600 + 5 * 60 + 7
        self.assertEqual(parse_timestamp_seconds("2026-02-16T10:05:07Z"), expected)

    def test_fractional_seconds_are_ignored(self) -> None:
        self.assertEqual(
            parse_timestamp_seconds("2026-02-16T10:05:07.981Z"),
            parse_timestamp_seconds("2026-02-16T10:05:07Z"),
        )

    def test_month_boundary_is_approximate(self) -> None:
        jan_31 = parse_timestamp_seconds("2026-01-31T00:00:00Z")
        feb_01 = parse_timestamp_seconds("2026-02-01T00:00:00Z")
        self.assertEqual(jan_31, feb_01)

    def test_unparseable_values(self) -> None:
        for value in (None, "", "2026-02-16", "2026-02-16 10:00:00", "2026-02T10:00:00", "1969-12-31T23:59:59Z", "not a date"):
            with self.subTest(value=value):
                self.assertIsNone(parse_timestamp_seconds(value))


class CalculateElapsedTests(unittest.TestCase):
    def test_elapsed_between_start_and_end(self) -> None:
        self.assertEqual(calculate_elapsed("2026-02-16T10:00:00Z", "2026-02-16T10:01:30Z"), 90)

    def test_missing_end_uses_now(self) -> None:
        start = parse_timestamp_seconds("2026-02-16T10:00:00Z")
        self.assertEqual(calculate_elapsed("2026-02-16T10:00:00Z", None, now=start + 12), 12)

    def test_missing_start_uses_now(self) -> None:
        self.assertEqual(calculate_elapsed(None, None, now=1000), 0)

    def test_negative_durations_clamp_to_zero(self) -> None:
        self.assertEqual(calculate_elapsed("2026-02-16T10:01:00Z", "2026-02-16T10:00:00Z"), 0)


if __name__ == "__main__":
    unittest.main()
