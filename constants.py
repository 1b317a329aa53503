# constants.py
"""
Application-level constants.

These values are static and do not change between runs. They define the
look and feel of the star-dust layer (seeding density, drift, twinkle,
pointer interaction radii, glow thresholds) and are deliberately not part
of config.json.
"""
import math

# --- Seeding ---
# One particle per DENSITY_DIVISOR square pixels of viewport area.
DENSITY_DIVISOR = 8500
# Bounds on the particle count: small screens still get a visible field,
# 4k screens are capped to keep the frame budget.
MIN_PARTICLES = 50
MAX_PARTICLES = 450

# Drift velocity range per axis, in pixels per frame.
DRIFT_SPEED = 0.25
# Base circle radius range [SIZE_MIN, SIZE_MAX).
SIZE_MIN = 1.0
SIZE_MAX = 3.0
# Steady-state opacity range [BASE_ALPHA_MIN, BASE_ALPHA_MAX).
BASE_ALPHA_MIN = 0.2
BASE_ALPHA_MAX = 0.6
TWO_PI = 2.0 * math.pi

# --- Motion & Twinkle ---
# Particles may leave the viewport by this many pixels before wrapping.
WRAP_MARGIN = 10.0
# Phase advance per frame (radians) and opacity swing of the twinkle.
TWINKLE_STEP = 0.05
TWINKLE_AMPLITUDE = 0.15

# --- Pointer Interaction ---
ATTRACTION_RADIUS = 300.0
KILL_RADIUS = 5.0
FADE_RADIUS = 25.0
# Pull speed (px/frame) at full eased force.
SUCTION_SPEED = 1.5
# How much the eased force brightens particles in the attraction band.
ATTRACTION_ALPHA_BOOST = 0.2
# Rendered size at the kill boundary, as a fraction of the base size.
FADE_MIN_SIZE_RATIO = 0.4
# Off-surface pointer coordinate meaning "no active interaction".
POINTER_SENTINEL = (-1000.0, -1000.0)

# --- Rendering ---
PARTICLE_TINT = (220, 230, 255) # Pale light blue
GLOW_COLOR = (255, 255, 255)
# Particles fainter than this are not drawn at all.
DRAW_ALPHA_THRESHOLD = 0.01
# Glow is only applied to particles bigger and brighter than these.
GLOW_SIZE_THRESHOLD = 2.0
GLOW_ALPHA_THRESHOLD = 0.2
# Halo blur radius and peak intensity, both scaled by the rendered alpha.
GLOW_BLUR_SCALE = 4.0
GLOW_INTENSITY = 0.3
# Number of concentric rings used to approximate the blurred halo.
GLOW_RINGS = 4

# --- Scroll Fade ---
# The layer fades in between these fractions of the viewport height.
FADE_START_RATIO = 0.2
FADE_END_RATIO = 0.8
# Duration (ms) of the eased transition towards the scroll-fade target.
OPACITY_TRANSITION_MS = 1000.0

# --- Host Window ---
DEFAULT_FPS = 60
DEFAULT_WINDOW_SIZE = (1280, 720)
BACKGROUND_COLOR = (5, 6, 12) # Near-black page
