"""
export.py — Debug export of what the engine rendered.

TraceRecorder keeps the last N frames published by the scheduler's UI
tick. Frames can be drawn with OpenCV, written out as a video, or saved
as a single PNG snapshot with Pillow.
"""

import logging
import os
from collections import deque
from datetime import datetime

import cv2
import numpy as np
from PIL import Image

from geometry import Position

logger = logging.getLogger(__name__)

_BACKGROUND   = (45, 45, 45)       # BGR
_FILL         = {
    "at_rest":   (235, 235, 235),
    "dragging":  (229, 70, 79),
    "returning": (218, 130, 42),
    "colliding": (60, 60, 220),
}
_OUTLINE      = (20, 20, 20)
_LABEL        = (15, 15, 15)
_MAX_FRAMES   = 1800               # ~30 s at 60 Hz


def default_filename(stem: str, ext: str) -> str:
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    return f"{stem}-{timestamp}{ext}"


# ---------------------------------------------------------------------------
# Recording
# ---------------------------------------------------------------------------

class TraceRecorder:
    """Collect rendered frames; connect ``record`` to ``frame_ready``."""

    def __init__(self, engine, max_frames: int = _MAX_FRAMES):
        self._engine = engine
        self._frames: deque = deque(maxlen=max_frames)
        self.recording = False

    def start(self):
        self._frames.clear()
        self.recording = True

    def stop(self):
        self.recording = False

    def record(self, frame: dict):
        if not self.recording:
            return
        states = {}
        for bubble_id in frame:
            if bubble_id in self._engine.store:
                states[bubble_id] = self._engine.get_state(bubble_id).value
        self._frames.append((dict(frame), states))

    def frames(self) -> list:
        return list(self._frames)

    def __len__(self):
        return len(self._frames)


# ---------------------------------------------------------------------------
# Drawing
# ---------------------------------------------------------------------------

def render_frame(frame: dict[str, Position], radii: dict[str, float],
                 width: int, height: int,
                 states: dict[str, str] | None = None) -> np.ndarray:
    """Draw one frame to an H × W × 3 BGR image."""
    W, H = max(2, int(width)), max(2, int(height))
    W = W if W % 2 == 0 else W + 1     # codec-friendly even dimensions
    H = H if H % 2 == 0 else H + 1
    image = np.full((H, W, 3), _BACKGROUND, dtype=np.uint8)
    states = states or {}

    for bubble_id, pos in frame.items():
        r = radii.get(bubble_id)
        if r is None:
            continue
        center = (int(round(pos.x + r)), int(round(pos.y + r)))
        fill = _FILL.get(states.get(bubble_id, "at_rest"), _FILL["at_rest"])
        cv2.circle(image, center, int(round(r)), fill, thickness=-1,
                   lineType=cv2.LINE_AA)
        cv2.circle(image, center, int(round(r)), _OUTLINE, thickness=2,
                   lineType=cv2.LINE_AA)
        (tw, th), _ = cv2.getTextSize(bubble_id, cv2.FONT_HERSHEY_SIMPLEX, 0.5, 1)
        cv2.putText(image, bubble_id, (center[0] - tw // 2, center[1] + th // 2),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.5, _LABEL, 1, cv2.LINE_AA)
    return image


def engine_radii(engine) -> dict[str, float]:
    return {bubble_id: engine.get_radius(bubble_id) for bubble_id in engine.ids()}


# ---------------------------------------------------------------------------
# Files
# ---------------------------------------------------------------------------

def save_snapshot(engine, path: str) -> str:
    """Write the engine's current rendered frame as an image via Pillow."""
    frame = {bubble_id: engine.get_rendered_position(bubble_id)
             for bubble_id in engine.ids()}
    states = {bubble_id: engine.get_state(bubble_id).value
              for bubble_id in engine.ids()}
    bgr = render_frame(frame, engine_radii(engine),
                       engine.store.width, engine.store.height, states)
    Image.fromarray(cv2.cvtColor(bgr, cv2.COLOR_BGR2RGB)).save(path)
    logger.info(f"Snapshot saved to {path}")
    return path


def export_trace_video(recorder: TraceRecorder, engine, path: str,
                       fps: float | None = None) -> int:
    """Write every recorded frame to ``path``; return the frame count."""
    frames = recorder.frames()
    if not frames:
        raise ValueError("no frames recorded")

    fps = fps or engine.config.scheduler.ui_rate_hz
    radii = engine_radii(engine)
    W, H = int(engine.store.width), int(engine.store.height)
    first = render_frame(frames[0][0], radii, W, H, frames[0][1])
    h, w = first.shape[:2]

    fourcc = cv2.VideoWriter_fourcc(*'mp4v')
    writer = cv2.VideoWriter(path, fourcc, fps, (w, h))
    if not writer.isOpened():
        raise OSError(f"cannot open video writer for {path}")
    try:
        writer.write(first)
        for frame, states in frames[1:]:
            writer.write(render_frame(frame, radii, W, H, states))
    except Exception:
        writer.release()
        _safe_remove(path)
        raise
    writer.release()

    logger.info(f"Trace of {len(frames)} frame(s) written to {path}")
    return len(frames)


def _safe_remove(path: str):
    try:
        if os.path.exists(path):
            os.remove(path)
    except OSError:
        logger.warning(f"Could not remove {path}")
