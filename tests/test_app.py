import json
import unittest

from app import app as flask_app  # noqa: E402
import app as app_mod             # noqa: E402
from game import GameConfig       # noqa: E402


def _post(client, url, payload):
    return client.post(url, data=json.dumps(payload), content_type="application/json")


def _position_of(state, icon, skip=()):
    for card in state["cards"]:
        if card["icon"] == icon and card["position"] not in skip:
            return card["position"]
    raise AssertionError(f"icon {icon} not found")


class TestFlaskAPI(unittest.TestCase):
    def setUp(self):
        self._orig_config = app_mod.CONFIG
        app_mod.CONFIG = GameConfig(icons=("A", "B"), mismatch_delay_ms=1000, win_delay_ms=500)
        self.client = flask_app.test_client()

    def tearDown(self):
        app_mod.CONFIG = self._orig_config

    def test_given_index_and_static_assets_when_requested_then_html_and_correct_mime(self):
        r = self.client.get("/")
        self.assertEqual(r.status_code, 200)
        self.assertIn(b"Memory Match", r.data)

        rjs = self.client.get("/main.js")
        self.assertEqual(rjs.status_code, 200)
        self.assertIn("application/javascript", rjs.headers.get("Content-Type", ""))

        rcss = self.client.get("/styles.css")
        self.assertEqual(rcss.status_code, 200)
        self.assertIn("text/css", rcss.headers.get("Content-Type", ""))

    def test_given_renderer_script_when_served_then_clicks_blocked_while_select_in_flight(self):
        js = self.client.get("/main.js").get_data(as_text=True)
        self.assertIn("let busy = false;", js)
        self.assertIn("if (busy ||", js)
        self.assertIn("busy = true;", js)

    def test_given_config_when_requested_then_delays_are_reported(self):
        r = self.client.get("/api/config")
        d = r.get_json()
        self.assertTrue(d["ok"])
        self.assertEqual(d["config"]["mismatchDelayMs"], 1000)
        self.assertEqual(d["config"]["winDelayMs"], 500)
        self.assertEqual(d["config"]["icons"], ["A", "B"])

    def test_given_new_game_when_posted_then_returns_hidden_view_and_counters(self):
        r = _post(self.client, "/api/new", {"seed": 123})
        self.assertEqual(r.status_code, 200)
        d = r.get_json()
        self.assertTrue(d["ok"])
        self.assertEqual(d["phase"], "idle")
        self.assertEqual(d["moveCount"], 0)
        self.assertEqual(d["matchedCount"], 0)
        self.assertEqual(d["pairs"], 2)
        self.assertEqual(d["generation"], 1)
        self.assertEqual(len(d["view"]), 4)
        for card in d["view"]:
            self.assertEqual(card["state"], "hidden")
            self.assertNotIn("face", card)
        icons = sorted(c["icon"] for c in d["state"]["cards"])
        self.assertEqual(icons, ["A", "A", "B", "B"])

        same = _post(self.client, "/api/new", {"seed": 123}).get_json()
        self.assertEqual(same["state"]["cards"], d["state"]["cards"])

    def test_given_full_play_when_selecting_pairs_then_match_and_win_reported(self):
        d = _post(self.client, "/api/new", {"seed": 5, "previousGeneration": 3}).get_json()
        state = d["state"]
        self.assertEqual(state["generation"], 4)

        a1 = _position_of(state, "A")
        a2 = _position_of(state, "A", skip=(a1,))
        r1 = _post(self.client, "/api/select", {"state": state, "position": a1}).get_json()
        self.assertEqual(r1["outcome"], "revealed")
        revealed = [c for c in r1["view"] if c["state"] == "revealed"]
        self.assertEqual(revealed[0]["face"]["icon"], "A")

        r2 = _post(self.client, "/api/select", {"state": r1["state"], "position": a2}).get_json()
        self.assertEqual(r2["outcome"], "matched")
        self.assertEqual(r2["moveCount"], 1)
        self.assertEqual(r2["matchedCount"], 1)
        self.assertIsNone(r2["win"])

        b1 = _position_of(state, "B")
        b2 = _position_of(state, "B", skip=(b1,))
        r3 = _post(self.client, "/api/select", {"state": r2["state"], "position": b1}).get_json()
        r4 = _post(self.client, "/api/select", {"state": r3["state"], "position": b2}).get_json()
        self.assertEqual(r4["outcome"], "won")
        self.assertEqual(r4["phase"], "won")
        self.assertEqual(r4["win"]["moveCount"], 2)
        self.assertEqual(r4["win"]["announceAfterMs"], 500)

        again = _post(self.client, "/api/select", {"state": r4["state"], "position": b1}).get_json()
        self.assertEqual(again["outcome"], "ignored")
        self.assertIsNone(again["win"])

    def test_given_mismatch_when_resolved_then_cards_flip_back(self):
        state = _post(self.client, "/api/new", {"seed": 9}).get_json()["state"]
        a = _position_of(state, "A")
        b = _position_of(state, "B")
        r1 = _post(self.client, "/api/select", {"state": state, "position": a}).get_json()
        r2 = _post(self.client, "/api/select", {"state": r1["state"], "position": b}).get_json()
        self.assertEqual(r2["outcome"], "mismatched")
        self.assertEqual(r2["phase"], "evaluating")
        self.assertEqual(r2["resolveAfterMs"], 1000)
        self.assertEqual(r2["moveCount"], 1)

        r3 = _post(self.client, "/api/resolve", {"state": r2["state"], "generation": r2["generation"]}).get_json()
        self.assertTrue(r3["ok"])
        self.assertTrue(r3["resolved"])
        self.assertEqual(r3["phase"], "idle")
        self.assertTrue(all(c["state"] == "hidden" for c in r3["view"]))

    def test_given_state_when_viewed_then_pretty_board_returned(self):
        state = _post(self.client, "/api/new", {"seed": 1}).get_json()["state"]
        r = _post(self.client, "/api/view", {"state": state})
        d = r.get_json()
        self.assertTrue(d["ok"])
        self.assertIn("0", d["board"])
        self.assertEqual(d["phase"], "idle")


if __name__ == "__main__":
    unittest.main(verbosity=2)
