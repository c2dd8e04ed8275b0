"""Constants for wsltransfer."""

# Box drawing characters (Unicode).
BOX_TL = "╔"
BOX_TR = "╗"
BOX_BL = "╚"
BOX_BR = "╝"
BOX_H = "═"
BOX_V = "║"

# Single-line box characters.
SB_TL = "┌"
SB_TR = "┐"
SB_BL = "└"
SB_BR = "┘"
SB_H = "─"
SB_V = "│"

# ASCII fallback for terminals without Unicode.
ASCII_BOX = ("+", "+", "+", "+", "-", "|")

# Color pair IDs.
C_PANE_BORDER = 1
C_PANE_BORDER_ACTIVE = 2
C_PANE_TITLE = 3
C_PANE_BODY = 4
C_SELECTED = 5
C_SELECTED_INACTIVE = 6
C_DIRECTORY = 7
C_STATUS = 8
C_STATUS_ERROR = 9
C_HELP = 10

# Layout constants
STATUS_BAR_HEIGHT = 1        # Outcome / message line
HELP_BAR_HEIGHT = 1          # Key binding line
PANE_BORDER_ROWS = 2         # Top and bottom border of each pane
SIZE_COLUMN_WIDTH = 8        # Right-aligned size column in file rows

HELP_TEXT = (
    " q Quit  Tab Switch  j/k Move  l/Enter Open  h Up"
    "  e Export  i Import  r Refresh  y Yank path "
)
