# --- Constants ---
WIDTH, HEIGHT = 1280, 720
FPS = 60
CANVAS_ID = "particles-canvas"

# --- Colors ---
WHITE = (255, 255, 255)
BLACK = (0, 0, 0)
RED = (255, 60, 60)
GOLD = (255, 215, 0)
BACKGROUND = (10, 8, 16)

# --- Pools ---
DEFAULT_POOL_SIZE = 80
GLYPH_POOL_SIZE = 60
CONFETTI_POOL_SIZE = 150

# --- Particle styling ---
DUST_COLOR = "#c8b89a"
GLYPH_COLOR = "#00ff88"
FLAKE_COLOR = "#ffd700"
STAR_COLORS = ("#ffffff", "#aaaaff", "#ffffaa")  # white, pale blue, pale yellow
CONFETTI_COLORS = (
    "#ffd700", "#ff6b6b", "#4ecdc4", "#45b7d1",
    "#f9ca24", "#ff4757", "#2ed573", "#5f27cd",
)
HEBREW_GLYPHS = "אבגדהוזחטיכלמנסעפצקרשת"

# Off-screen margins used when spawning above the top edge / recycling below the bottom
GOLD_WRAP_TOP = -5
FIRE_ESCAPE_TOP = -10
GLYPH_MARGIN = 20
FALL_MARGIN = 10
