import base64

import cv2
import numpy as np
from flask import Flask, jsonify, request

from processing import io_utils, pipeline
from processing.config import APP_CONFIG
from processing.errors import UnknownColorSpaceError
from processing.logging_config import get_logger, setup_logging

logger = get_logger("server")

app = Flask(__name__)


# ---------- Helpers ---------- #
def _decode_image(data_url: str, max_dim: int | None = 1600) -> tuple[np.ndarray, dict]:
    """Decode base64 data URL to an RGB(A) uint8 array, with optional downscale for performance."""
    if "," in data_url:
        data_url = data_url.split(",", 1)[1]
    try:
        img_bytes = base64.b64decode(data_url, validate=True)
    except (TypeError, ValueError) as exc:
        raise ValueError("Image payload is not valid base64.") from exc
    buf = np.frombuffer(img_bytes, np.uint8)
    decoded = cv2.imdecode(buf, cv2.IMREAD_UNCHANGED) if buf.size else None
    if decoded is None:
        raise ValueError("Failed to decode image.")
    decoded = io_utils.ensure_uint8(decoded)
    h, w = decoded.shape[:2]
    meta = {"downsized": False, "original_size": (w, h)}
    if max_dim is not None and max(h, w) > max_dim:
        ratio = max_dim / max(h, w)
        new_w, new_h = max(1, int(w * ratio)), max(1, int(h * ratio))
        decoded = cv2.resize(decoded, (new_w, new_h), interpolation=cv2.INTER_AREA)
        meta["downsized"] = True
        meta["new_size"] = (new_w, new_h)
    return io_utils.from_bgr(decoded), meta


def _encode_image(img: np.ndarray) -> str:
    """Encode numpy image to base64 PNG data URL."""
    success, buffer = cv2.imencode(".png", io_utils.to_bgr(io_utils.ensure_uint8(img)))
    if not success:
        raise ValueError("Failed to encode image.")
    b64 = base64.b64encode(buffer).decode("utf-8")
    return f"data:image/png;base64,{b64}"


# ---------- Routes ---------- #
@app.route("/api/process", methods=["POST"])
def process_image():
    try:
        payload = request.get_json(force=True, silent=True) or {}
        img_data = payload.get("image")
        action = payload.get("action")
        params = payload.get("params") or {}
        if img_data is None or action is None:
            return jsonify({"error": "Missing image or action."}), 400

        img, decode_meta = _decode_image(img_data, max_dim=APP_CONFIG.max_dim)
        result = pipeline.run(action, img, params)
        extra = dict(result.extra)
        if decode_meta.get("downsized"):
            extra["downsized_from"] = decode_meta["original_size"]
            extra["processed_size"] = decode_meta["new_size"]
        images = [
            {"title": stage.title, "image": _encode_image(stage.image), "info": io_utils.info(stage.image)}
            for stage in result.stages
        ]
        for note in result.notes:
            logger.info("%s: %s", action, note)
        return jsonify({"images": images, "notes": result.notes, "extra": extra})
    except UnknownColorSpaceError as exc:
        logger.warning("Rejected color space %r", exc.name)
        return jsonify({"error": str(exc)}), 400
    except ValueError as exc:
        logger.warning("Rejected request: %s", exc)
        return jsonify({"error": str(exc)}), 400
    except Exception as exc:  # noqa: BLE001
        logger.exception("Processing failed")
        return jsonify({"error": str(exc)}), 500


def main():
    setup_logging(APP_CONFIG.log_level)
    app.run(host=APP_CONFIG.host, port=APP_CONFIG.port, debug=False)


if __name__ == "__main__":
    main()
