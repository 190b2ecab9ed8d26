import json
import unittest

from crowdhandler_sdk.session import RequestSession
from crowdhandler_sdk.waiting_room import WaitingRoomBridge, waiting_room_url


class WaitingRoomUrlTests(unittest.TestCase):
    def test_url_with_token(self) -> None:
        self.assertEqual(
            waiting_room_url("herb-girls", "tok1"),
            "https://wait.crowdhandler.com/herb-girls?ch-id=tok1&ch_mode=python",
        )

    def test_url_without_token(self) -> None:
        self.assertEqual(
            waiting_room_url("room-a", None, mode="app"),
            "https://wait.crowdhandler.com/room-a?ch-id=&ch_mode=app",
        )


class WaitingRoomBridgeTests(unittest.TestCase):
    def setUp(self) -> None:
        self.session = RequestSession("pk-test", token="t1")
        self.promoted_tokens: list[str | None] = []
        self.dismissed = 0

        def dismiss() -> None:
            self.dismissed += 1

        self.bridge = WaitingRoomBridge(
            self.session,
            "room-a",
            on_promoted=self.promoted_tokens.append,
            on_dismiss=dismiss,
        )

    def test_url_tracks_session_token(self) -> None:
        self.assertIn("ch-id=t1", self.bridge.url)
        self.session.update_token("t2")
        self.assertIn("ch-id=t2", self.bridge.url)

    def test_promotion_with_token(self) -> None:
        handled = self.bridge.handle_message(json.dumps({"promoted": 1, "token": "t9"}))

        self.assertTrue(handled)
        self.assertTrue(self.bridge.promoted)
        self.assertEqual(self.session.token, "t9")
        self.assertEqual(self.promoted_tokens, ["t9"])
        self.assertEqual(self.dismissed, 1)

    def test_promotion_without_token_keeps_session_token(self) -> None:
        handled = self.bridge.handle_message('{"promoted": 1}')

        self.assertTrue(handled)
        self.assertEqual(self.session.token, "t1")
        self.assertEqual(self.promoted_tokens, [None])
        self.assertEqual(self.dismissed, 1)

    def test_still_queued_message_ignored(self) -> None:
        handled = self.bridge.handle_message('{"promoted": 0, "token": "t9"}')

        self.assertFalse(handled)
        self.assertEqual(self.session.token, "t1")
        self.assertEqual(self.dismissed, 0)

    def test_promoted_must_be_integer_one(self) -> None:
        self.assertFalse(self.bridge.handle_message('{"promoted": true, "token": "t9"}'))
        self.assertFalse(self.bridge.handle_message('{"promoted": 1.0, "token": "t9"}'))
        self.assertFalse(self.bridge.handle_message('{"promoted": "1"}'))

        self.assertFalse(self.bridge.promoted)
        self.assertEqual(self.session.token, "t1")
        self.assertEqual(self.dismissed, 0)

    def test_malformed_message_ignored(self) -> None:
        self.assertFalse(self.bridge.handle_message("not json"))
        self.assertFalse(self.bridge.handle_message("[1, 2]"))
        self.assertEqual(self.dismissed, 0)

    def test_non_string_token_ignored(self) -> None:
        handled = self.bridge.handle_message('{"promoted": 1, "token": 5}')

        self.assertTrue(handled)
        self.assertEqual(self.session.token, "t1")

    def test_callbacks_optional(self) -> None:
        bridge = WaitingRoomBridge(self.session, "room-a")
        self.assertTrue(bridge.handle_message('{"promoted": 1, "token": "t3"}'))
        self.assertEqual(self.session.token, "t3")


if __name__ == "__main__":
    unittest.main()
