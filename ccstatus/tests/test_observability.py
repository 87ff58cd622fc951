import unittest

from ccstatus.observability import otel


class ObservabilityTests(unittest.TestCase):
    def test_normalize_otlp_endpoint(self) -> None:
        self.assertEqual(otel._normalize_otlp_endpoint("http://collector:4318", "/v1/traces"), "http://collector:4318/v1/traces")
        self.assertEqual(otel._normalize_otlp_endpoint("http://collector:4318/", "/v1/metrics"), "http://collector:4318/v1/metrics")
        self.assertEqual(otel._normalize_otlp_endpoint("http://collector:4318/v1", "/v1/traces"), "http://collector:4318/v1/traces")
        self.assertEqual(otel._normalize_otlp_endpoint("", "/v1/traces"), "")

    def test_helpers_are_noops_when_disabled(self) -> None:
        with otel.start_span("ccstatus.test", {"key": "value"}) as span:
            self.assertIsNone(span)
        otel.record_transcript_parse("success", 1.5)
        otel.record_malformed_lines(3)
        otel.record_malformed_lines(0)


if __name__ == "__main__":
    unittest.main()
