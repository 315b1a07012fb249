"""Pure data: palette, label thresholds, and layout constants.

No library imports. Every value here is a default that ChartConfig copies
into its own frozen fields, so layouts never read this module directly
while computing geometry.
"""

# Categorical palette (d3.schemeTableau10)
PALETTE = (
    "#4e79a7",  # blue
    "#f28e2c",  # orange
    "#e15759",  # red
    "#76b7b2",  # teal
    "#59a14f",  # green
    "#edc949",  # yellow
    "#af7aa1",  # purple
    "#ff9da7",  # pink
    "#9c755f",  # brown
    "#bab0ab",  # grey
)

COLORS = {
    "root": "#ccc",
    "text": "#ffffff",
    "muted": "#6B6860",
    "stroke": "#ffffff",
    "bg": "#ffffff",
}

# Chart margins in surface units
MARGIN = {"top": 40, "right": 30, "bottom": 60, "left": 60}

# Cell label legibility thresholds, absolute units
LABELS = {
    "min_width": 20,        # hide labels at or below
    "min_height": 15,
    "initial_below": 40,    # first letter only
    "middle_below": 80,     # start...end
    "truncate_below": 120,  # start...
    "abbreviate_below": 60, # 1.2K / 3.4M values
    "char_width": 6,        # approximate glyph advance
    "icicle_min_height": 16,
}

LAYOUT = {
    "treemap_padding": 2,
    "fill_opacity": 0.6,
    "ribbon_opacity": 0.7,
    "hex_opacity": 0.7,
    "hex_radius": 30,
    "stage_padding": 0.3,
    "band_padding": 0.1,
    "legend_swatch": 12,
    "legend_spacing": 120,
    "flow_legend_spacing": 100,
    "legend_offset": 20,
    "flow_legend_offset": 25,
    "label_inset": 4,
    "label_font": 10,
    "stage_label_gap": 16,
    "category_label_gap": 10,
}

# Surface sizing fallbacks
SIZING = {
    "parent_height_ratio": 0.8,
    "min_height": 300,
    "retry_delay": 0.010,   # seconds
    "max_retries": 100,
    "debounce": 0.100,      # seconds
}
