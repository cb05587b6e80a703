"""Configuration constants for Image Sifter."""

IMAGE_EXTENSIONS = {".jpg", ".jpeg"}

# Sidecar lookup order: first existing match wins
SIDECAR_EXTENSIONS = (".CR3", ".cr3")

# Cache: load current + PRELOAD_AHEAD, retain [current - CACHE_BEHIND, current + CACHE_AHEAD)
PRELOAD_AHEAD = 10
CACHE_BEHIND = 5
CACHE_AHEAD = 15
INITIAL_PRELOAD = 5

# Output folder created under the working root
KEPT_FOLDER = "kept_images"

# UI colors
COLOR_BG = "#000000"
COLOR_KEEP = "#00cc00"
COLOR_DISCARD = "#ff3333"
COLOR_STATUS_BG = "#1a1a1a"
COLOR_STATUS_FG = "#cccccc"
COLOR_FILENAME = "#ffffff"
COLOR_BUTTON_BG = "#27272a"

# Status bar and button row heights
STATUS_BAR_HEIGHT = 40
BUTTON_ROW_HEIGHT = 70
PLACEHOLDER_SIZE = (800, 600)
