from __future__ import annotations

import logging
import os
import random
from typing import Any, Dict, List, Optional

from flask import Flask, jsonify, request, send_from_directory

from game import (
    BACK_GLYPH,
    AssetResolver,
    CardState,
    GameConfig,
    GameState,
    board_from_order,
    new_game,
    pending_mismatch,
    resolve_mismatch,
    select_card,
    setup_logging,
    Outcome,
)

logger = logging.getLogger("memory_core.app")

CONFIG = GameConfig.from_env()
ASSETS = AssetResolver(CONFIG.static_dir)

# Serve static assets from the configured static directory (explicit absolute path)
STATIC_DIR = os.path.abspath(CONFIG.static_dir)
app = Flask(__name__, static_url_path="/static", static_folder=STATIC_DIR)


# ---------- Static routes ----------

@app.get("/")
def index() -> Any:
    return send_from_directory(app.static_folder, "index.html")


@app.get("/main.js")
def main_js() -> Any:
    resp = send_from_directory(app.static_folder, "main.js")
    resp.headers["Content-Type"] = "application/javascript; charset=utf-8"
    return resp


@app.get("/styles.css")
def styles_css() -> Any:
    resp = send_from_directory(app.static_folder, "styles.css")
    resp.headers["Content-Type"] = "text/css; charset=utf-8"
    return resp


@app.get("/static/<path:filename>")
def static_files(filename: str) -> Any:
    return send_from_directory(app.static_folder, filename)


# ---------- JSON (de)serialisation ----------

def _state_to_json(s: GameState) -> Dict[str, Any]:
    return {
        "cards": [{"position": c.position, "icon": c.icon, "state": c.state.value} for c in s.board.cards],
        "selection": [int(p) for p in s.selection],
        "matchedCount": int(s.matched_count),
        "moveCount": int(s.move_count),
        "generation": int(s.generation),
    }


def _json_to_state(obj: Any) -> GameState:
    """Rebuilds a GameState from the client blob, rejecting anything the engine could not have produced."""
    if not isinstance(obj, dict):
        raise ValueError("state must be an object")
    cards = obj["cards"]
    if not isinstance(cards, list):
        raise ValueError("cards must be a list")
    ordered = sorted(cards, key=lambda c: int(c["position"]))
    if [int(c["position"]) for c in ordered] != list(range(len(ordered))):
        raise ValueError("card positions must be 0..N-1")
    board = board_from_order([str(c["icon"]) for c in ordered])
    for state_value in (CardState.REVEALED, CardState.MATCHED):
        positions = [int(c["position"]) for c in ordered if CardState(c.get("state", "hidden")) is state_value]
        board = board.with_states(positions, state_value)

    selection = tuple(int(p) for p in obj.get("selection", []))
    revealed = board.positions_in(CardState.REVEALED)
    if len(selection) > 2 or len(set(selection)) != len(selection) or sorted(selection) != sorted(revealed):
        raise ValueError("selection must list exactly the face-up unmatched cards")
    matched = board.positions_in(CardState.MATCHED)
    matched_icons = {board.at(p).icon for p in matched}
    if len(matched_icons) * 2 != len(matched):
        raise ValueError("matched cards must come in complete pairs")
    if len(selection) == 2 and board.at(selection[0]).icon == board.at(selection[1]).icon:
        raise ValueError("a matching pair cannot be pending")
    matched_count = int(obj.get("matchedCount", len(matched_icons)))
    if matched_count != len(matched_icons):
        raise ValueError("matchedCount does not agree with the board")
    move_count = int(obj.get("moveCount", 0))
    if move_count < 0:
        raise ValueError("moveCount must be non-negative")
    return GameState(
        board=board,
        selection=selection,
        matched_count=matched_count,
        move_count=move_count,
        generation=int(obj.get("generation", 0)),
    )


def _view_to_json(s: GameState) -> List[Dict[str, Any]]:
    # Only face-up cards expose their icon to the renderer.
    out: List[Dict[str, Any]] = []
    for c in s.board.cards:
        entry: Dict[str, Any] = {"position": c.position, "state": c.state.value}
        if c.face_up:
            face = ASSETS.resolve(c.icon)
            entry["face"] = {"icon": face.icon, "src": face.src, "glyph": face.glyph}
        else:
            entry["back"] = BACK_GLYPH
        out.append(entry)
    return out


def _payload(s: GameState) -> Dict[str, Any]:
    return {
        "state": _state_to_json(s),
        "view": _view_to_json(s),
        "phase": s.phase.value,
        "moveCount": s.move_count,
        "matchedCount": s.matched_count,
        "pairs": s.pairs,
        "generation": s.generation,
    }


def _config_json() -> Dict[str, Any]:
    return {
        "mismatchDelayMs": CONFIG.mismatch_delay_ms,
        "winDelayMs": CONFIG.win_delay_ms,
        "icons": list(CONFIG.icons),
    }


def _bad_state(e: Exception) -> Any:
    return jsonify({"ok": False, "error": f"bad state: {e}"}), 400


# ---------- Game API (required by main.js) ----------

@app.get("/api/config")
def api_config() -> Any:
    return jsonify({"ok": True, "config": _config_json()})


@app.post("/api/new")
def api_new() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    icons = body.get("icons")
    if icons is None:
        icons = list(CONFIG.icons)
    seed = body.get("seed", CONFIG.seed)
    try:
        previous = int(body.get("previousGeneration", 0))
        if not isinstance(icons, list):
            raise ValueError("icons must be a list")
        rng = random.Random(seed) if seed is not None else None
        state = new_game([str(i) for i in icons], rng=rng, generation=previous + 1)
    except (TypeError, ValueError) as e:
        return jsonify({"ok": False, "error": str(e)}), 400
    logger.info("new game %d with %d pairs", state.generation, state.pairs)
    return jsonify({"ok": True, "config": _config_json(), **_payload(state)})


@app.post("/api/select")
def api_select() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    try:
        state = _json_to_state(body.get("state"))
    except (KeyError, TypeError, ValueError) as e:
        return _bad_state(e)
    position = body.get("position")
    try:
        next_state, result = select_card(state, position)
    except (IndexError, TypeError) as e:
        return jsonify({"ok": False, "error": f"bad position: {e}"}), 400

    win: Optional[Dict[str, Any]] = None
    if result.outcome is Outcome.WON:
        win = {
            "moveCount": next_state.move_count,
            "generation": next_state.generation,
            "announceAfterMs": CONFIG.win_delay_ms,
        }
        logger.info("game %d won in %d moves", next_state.generation, next_state.move_count)
    resolve_after = CONFIG.mismatch_delay_ms if result.outcome is Outcome.MISMATCHED else None
    return jsonify({
        "ok": True,
        "outcome": result.outcome.value,
        "positions": list(result.positions),
        "resolveAfterMs": resolve_after,
        "win": win,
        **_payload(next_state),
    })


@app.post("/api/resolve")
def api_resolve() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    try:
        state = _json_to_state(body.get("state"))
    except (KeyError, TypeError, ValueError) as e:
        return _bad_state(e)
    generation = body.get("generation")
    try:
        stale = generation is not None and int(generation) != state.generation
    except (TypeError, ValueError):
        return jsonify({"ok": False, "error": "generation must be an integer"}), 400
    resolved = not stale and pending_mismatch(state)
    next_state = resolve_mismatch(state) if resolved else state
    return jsonify({"ok": True, "resolved": resolved, "stale": stale, **_payload(next_state)})


@app.post("/api/view")
def api_view() -> Any:
    body = request.get_json(force=True, silent=True) or {}
    try:
        state = _json_to_state(body.get("state"))
    except (KeyError, TypeError, ValueError) as e:
        return _bad_state(e)
    return jsonify({"ok": True, "board": state.board.pretty(), **_payload(state)})


# Entrypoint for "python app.py"
if __name__ == "__main__":
    setup_logging(CONFIG.log_level)
    debug = os.getenv("FLASK_DEBUG", os.getenv("DEBUG", "0")).lower() in ("1", "true", "yes", "on")
    app.run(host="0.0.0.0", port=int(os.getenv("PORT", "5000")), debug=debug)
