import unittest
from unittest import mock

import _support  # noqa: F401

from resume_api.core.errors import AIProviderError, StructureExtractionError
from resume_api.services.llm_json import extract_json_object, retry_with_backoff


class ExtractJsonObjectTests(unittest.TestCase):
    def test_plain_json(self):
        self.assertEqual(extract_json_object('{"a": 1}'), {"a": 1})

    def test_markdown_fence(self):
        self.assertEqual(extract_json_object('```json\n{"a": [1, 2]}\n```'), {"a": [1, 2]})

    def test_prose_around_object(self):
        self.assertEqual(extract_json_object('Result:\n{"ok": true}\nDone.'), {"ok": True})

    def test_first_object_wins_over_later_braces(self):
        raw = 'Result: {"a": {"b": 1}} and later {"c": 2} or {not json}'
        self.assertEqual(extract_json_object(raw), {"a": {"b": 1}})

    def test_skips_brace_that_does_not_start_json(self):
        self.assertEqual(extract_json_object('Use {placeholders} like this: {"ok": true}'), {"ok": True})

    def test_no_object_among_braces_is_rejected(self):
        with self.assertRaises(ValueError):
            extract_json_object("only {prose} here")

    def test_array_is_rejected(self):
        with self.assertRaises(ValueError):
            extract_json_object("[1, 2, 3]")

    def test_empty_response_is_rejected(self):
        with self.assertRaises(ValueError):
            extract_json_object("   ")


class RetryWithBackoffTests(unittest.IsolatedAsyncioTestCase):
    async def test_retries_until_success_with_doubling_delay(self):
        outcomes = [AIProviderError("busy"), AIProviderError("busy"), "ok"]

        async def operation():
            outcome = outcomes.pop(0)
            if isinstance(outcome, Exception):
                raise outcome
            return outcome

        with mock.patch("resume_api.services.llm_json.asyncio.sleep", new=mock.AsyncMock()) as sleep:
            result = await retry_with_backoff(operation, attempts=3, base_delay_s=1.0, label="test")

        self.assertEqual(result, "ok")
        self.assertEqual([call.args[0] for call in sleep.await_args_list], [1.0, 2.0])

    async def test_gives_up_after_attempts(self):
        calls = []

        async def operation():
            calls.append(1)
            raise AIProviderError("down")

        with self.assertRaises(AIProviderError):
            await retry_with_backoff(operation, attempts=2, base_delay_s=0, label="test")
        self.assertEqual(len(calls), 2)

    async def test_non_retryable_error_propagates_immediately(self):
        calls = []

        async def operation():
            calls.append(1)
            raise StructureExtractionError("bad json")

        with self.assertRaises(StructureExtractionError):
            await retry_with_backoff(
                operation,
                attempts=3,
                base_delay_s=0,
                label="test",
                retryable=(AIProviderError,),
            )
        self.assertEqual(len(calls), 1)


if __name__ == "__main__":
    unittest.main()
