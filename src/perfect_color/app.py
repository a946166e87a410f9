from __future__ import annotations

import io
import logging
import threading
from typing import Any, Dict, Sequence

import numpy as np
from flask import Flask, jsonify, render_template, request, send_file
from PIL import Image

from .candidates import CandidateGenerator
from .color_space import Color, parse_color
from .config import Settings
from .picker import CANVAS_SIZE, pick_color, sv_plane
from .presentation import Option, PresentationAdapter, progress_fraction, progress_text
from .session import SessionController
from .share import FILENAME, share_png, share_text
from .storage import LastColorStore

log = logging.getLogger(__name__)

MAX_PLANE = 1024


class SnapshotView:
    """View that keeps the latest screen as a JSON-ready dict."""

    def __init__(self) -> None:
        self.screen: Dict[str, Any] = {"screen": "picker"}

    def show_picker(self) -> None:
        self.screen = {"screen": "picker"}

    def present_options(self, options: Sequence[Option]) -> None:
        self.screen = {
            "screen": "round",
            "options": [{"hex": o.color.hex, "label": o.label} for o in options],
        }

    def render_progress(self, round_index: int, predicted_total_rounds: int) -> None:
        self.screen["progress"] = {
            "round": round_index + 1,
            "total": predicted_total_rounds,
            "fraction": progress_fraction(round_index, predicted_total_rounds),
            "text": progress_text(round_index, predicted_total_rounds),
        }

    def show_result(self, color: Color) -> None:
        self.screen = {"screen": "result", "hex": color.hex, "share_text": share_text(color)}


def parse_hue(val: Any) -> float:
    try:
        hue = float(val)
    except (TypeError, ValueError):
        raise ValueError("hue must be a number")
    if not np.isfinite(hue):
        raise ValueError("hue must be finite")
    return hue % 360.0


def parse_size(val: Any) -> int:
    try:
        size = int(val)
    except (TypeError, ValueError, OverflowError):
        raise ValueError("size must be an integer")
    if not 1 <= size <= MAX_PLANE:
        raise ValueError(f"size must be in [1, {MAX_PLANE}]")
    return size


def color_from_payload(payload: Dict[str, Any]) -> Color:
    """Either {"color": "<css color>"} or a pointer {"hue", "x", "y", "size"}."""
    if payload.get("color"):
        return parse_color(str(payload["color"]))
    try:
        x = float(payload["x"])
        y = float(payload["y"])
    except (KeyError, TypeError, ValueError):
        raise ValueError("expected 'color' or numeric 'x' and 'y'")
    if not (np.isfinite(x) and np.isfinite(y)):
        raise ValueError("'x' and 'y' must be finite")
    hue = parse_hue(payload.get("hue", 0))
    size = parse_size(payload.get("size", CANVAS_SIZE))
    return pick_color(hue, x, y, size)


# ----------------------------- Flask app ----------------------------------


def create_app(settings: Settings | None = None) -> Flask:
    settings = settings or Settings.from_env()
    app = Flask(__name__, static_folder="static", template_folder="templates")
    logging.basicConfig(level=settings.log_level, format="%(levelname)s: %(message)s")

    store = LastColorStore(settings.store_path)
    rng = np.random.default_rng(settings.seed)
    controller = SessionController(
        config=settings.session,
        generator=CandidateGenerator(settings.session, rng),
        on_finish=[store.save],
    )
    view = SnapshotView()
    adapter = PresentationAdapter(controller, view, rng)
    lock = threading.Lock()

    app.extensions["perfect_color"] = adapter
    app.extensions["perfect_color.lock"] = lock

    def _body() -> Dict[str, Any]:
        payload = request.get_json(silent=True)
        if not isinstance(payload, dict):
            raise ValueError("expected a JSON object body")
        return payload

    def _state():
        return jsonify(view.screen)

    @app.errorhandler(ValueError)
    def bad_request(exc: ValueError):
        return jsonify({"error": str(exc)}), 400

    @app.route("/")
    def index():
        return render_template("index.html", canvas_size=CANVAS_SIZE)

    @app.route("/picker.png")
    def picker_png():
        hue = parse_hue(request.args.get("hue", 0))
        size = parse_size(request.args.get("size", CANVAS_SIZE))
        buf = io.BytesIO()
        Image.fromarray(sv_plane(hue, size)).save(buf, format="PNG")
        buf.seek(0)
        return send_file(buf, mimetype="image/png")

    @app.route("/api/state")
    def state():
        with lock:
            return _state()

    @app.route("/api/pick", methods=["POST"])
    def pick():
        color = color_from_payload(_body())
        with lock:
            adapter.on_pick(color)
            return _state()

    @app.route("/api/choice", methods=["POST"])
    def choice():
        try:
            index = int(_body()["index"])
        except (KeyError, TypeError, ValueError, OverflowError):
            raise ValueError("expected integer 'index'")
        with lock:
            adapter.on_choice(index)
            return _state()

    @app.route("/api/back", methods=["POST"])
    def back():
        with lock:
            adapter.on_back()
            return _state()

    @app.route("/api/restart", methods=["POST"])
    def restart():
        with lock:
            adapter.on_restart()
            return _state()

    @app.route("/api/last")
    def last():
        # saves happen inside session transitions, which hold the lock
        with lock:
            color = store.load()
        return jsonify({"lastColor": color.hex if color else None})

    @app.route("/share.png")
    def share():
        with lock:
            result = controller.result
        if result is None:
            return jsonify({"error": "no finished color to share"}), 409
        try:
            png = share_png(result)
        except Exception as exc:
            log.exception("Share image failed")
            return jsonify({"error": str(exc)}), 500
        return send_file(
            io.BytesIO(png),
            mimetype="image/png",
            as_attachment=True,
            download_name=FILENAME,
        )

    return app


if __name__ == "__main__":
    # Single in-process session; threaded requests are serialised by the lock.
    create_app().run(debug=False, threaded=True)
