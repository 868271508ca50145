# config.py
from dataclasses import dataclass
from typing import Optional

# ----- Canvas (terminal cells) -----
CANVAS_WIDTH, CANVAS_HEIGHT = 46, 46

# ----- Logical grid -----
# Each logical cell is drawn two columns wide, so x runs over half the canvas
# width; the playfield is drawn over roughly half the canvas height.
GRID_W = CANVAS_WIDTH // 2 - 1
GRID_H = CANVAS_HEIGHT // 2 - 2
START = (CANVAS_WIDTH // 4, CANVAS_HEIGHT // 4 - 1)

# ----- Timing -----
TICKS_PER_SEC = 10
INPUT_POLL_MS = 100

# ----- Glyphs -----
# vertical, horizontal, top-left, top-right, bottom-left, bottom-right
BORDER_STYLE = "│─╭╮╰╯"
APPLES = ("🍎", "🍏")
SNAKE_GLYPH = "██"

# ----- Keys -----
QUIT_KEY = "q"

# ----- Runtime knobs -----
@dataclass
class Config:
    seed: Optional[int] = None   # fixes apple placement when set
    debug_events: bool = False   # show last observed event under the board

CFG = Config()
