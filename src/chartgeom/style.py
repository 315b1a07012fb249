"""Translate theme.py constants into matplotlib rcParams for scene previews."""

import matplotlib as mpl
import matplotlib.pyplot as plt

from .theme import COLORS, PALETTE

PREVIEW = {
    "dpi": 80,
    "font_size": 9,
    "stroke_width": 1.0,
}

# matplotlib rcParams dict, applied by render.figure()
STYLE: dict = {
    # Figure
    "figure.dpi": PREVIEW["dpi"],
    "figure.facecolor": COLORS["bg"],
    "figure.edgecolor": "none",
    "savefig.dpi": PREVIEW["dpi"],
    "savefig.facecolor": COLORS["bg"],
    "savefig.edgecolor": "none",
    "savefig.pad_inches": 0.0,

    # Axes: scenes carry their own geometry, so no frame or grid
    "axes.facecolor": COLORS["bg"],
    "axes.prop_cycle": mpl.cycler(color=list(PALETTE)),
    "axes.spines.top": False,
    "axes.spines.right": False,
    "axes.spines.left": False,
    "axes.spines.bottom": False,
    "axes.grid": False,
    "xtick.bottom": False,
    "ytick.left": False,
    "xtick.labelbottom": False,
    "ytick.labelleft": False,

    # Patches
    "patch.linewidth": PREVIEW["stroke_width"],
    "patch.edgecolor": COLORS["stroke"],

    # Font
    "font.family": "sans-serif",
    "font.size": PREVIEW["font_size"],
}


def apply() -> None:
    """Apply the preview style to matplotlib globally."""
    plt.rcParams.update(STYLE)
