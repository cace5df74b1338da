"""
version.py — Single source of truth for the package version and branding.

History:
  v0.1.0 — Radial layout, pairwise collision pass, return-to-rest easing,
            dual-rate logic/UI scheduler, PyQt6 demo window.
  v0.2.0 — Pluggable easing curves (fractional and timed), per-bubble
            avoid-collision flag, YAML configuration, drift-corrected
            periodic tasks that drop late ticks instead of stacking them.
  v0.2.1 — Trace recorder with OpenCV video export and Pillow snapshots;
            remount keeps surviving bubbles where they are.
"""

__version__   = "0.2.1"
__app_name__  = "Bubble Menu"
__org_name__  = "Bubble Menu Contributors"
__copyright__ = "© 2026 Bubble Menu Contributors"
