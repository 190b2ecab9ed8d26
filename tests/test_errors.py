import unittest

from crowdhandler_sdk.errors import ApiError, CrowdHandlerError


class ErrorTests(unittest.TestCase):
    def test_str_includes_details(self) -> None:
        err = CrowdHandlerError("bad things", "more info")
        self.assertEqual(str(err), "bad things\nDetails: more info")

    def test_api_error_fields(self) -> None:
        err = ApiError("POST /requests", 503, '{"error": "down"}')

        self.assertIsInstance(err, CrowdHandlerError)
        self.assertEqual(err.status_code, 503)
        self.assertEqual(err.body, '{"error": "down"}')
        self.assertEqual(err.message, "POST /requests failed with status: 503")


if __name__ == "__main__":
    unittest.main()
