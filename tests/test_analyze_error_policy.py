import unittest

from lesson_api.domain.ai import AllBackendsOverloaded
from lesson_api.domain.ai.providers.common import ProviderRequestError
from lesson_api.services.analyze.error_policy import (
    RateLimited,
    ServiceMisconfigured,
    UpstreamFailed,
    UpstreamOverloaded,
    build_error_payload,
)
from lesson_api.services.analyze.pipeline_runtime import classify_ai_failure, config_error_message


class ErrorPayloadTests(unittest.TestCase):
    def test_payload_is_flat_and_bounded(self) -> None:
        payload = build_error_payload("  too   many\nspaces  " + "x" * 400)

        self.assertEqual(list(payload), ["error"])
        self.assertTrue(payload["error"].startswith("too many spaces"))
        self.assertLessEqual(len(payload["error"]), 260)

    def test_blank_message_falls_back_to_default(self) -> None:
        self.assertEqual(build_error_payload(""), {"error": "Request failed"})

    def test_rate_limited_carries_retry_after_header(self) -> None:
        exc = RateLimited(0)

        self.assertEqual(exc.status_code, 429)
        self.assertEqual(exc.retry_after_sec, 1)
        self.assertEqual(exc.headers, {"Retry-After": "1"})


class ClassifyAIFailureTests(unittest.TestCase):
    def test_overload_maps_to_503(self) -> None:
        self.assertIsInstance(classify_ai_failure(AllBackendsOverloaded(["gemini:a"], 3)), UpstreamOverloaded)
        self.assertIsInstance(
            classify_ai_failure(ProviderRequestError(provider="gemini", status_code=503, message="model overloaded")),
            UpstreamOverloaded,
        )

    def test_credentials_rejected_is_misconfiguration(self) -> None:
        failure = classify_ai_failure(ProviderRequestError(provider="openai", status_code=401, message="bad key"))
        self.assertIsInstance(failure, ServiceMisconfigured)
        self.assertEqual(failure.status_code, 500)

    def test_other_failures_map_to_502(self) -> None:
        timeout = classify_ai_failure(ProviderRequestError(provider="gemini", status_code=None, message="timed out"))
        self.assertIsInstance(timeout, UpstreamFailed)
        self.assertEqual(timeout.message, "AI request timed out")

        generic = classify_ai_failure(RuntimeError("boom"))
        self.assertIsInstance(generic, UpstreamFailed)
        self.assertEqual(generic.status_code, 502)

    def test_config_error_messages(self) -> None:
        self.assertEqual(config_error_message("gemini_api_key_missing"), "Missing GEMINI_API_KEY")
        self.assertEqual(config_error_message("unsupported_ai_provider:x"), "Unsupported AI provider")
        self.assertEqual(config_error_message("???"), "AI service configuration error")


if __name__ == "__main__":
    unittest.main()
