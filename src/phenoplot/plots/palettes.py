"""Fixed color palettes for composition and comparison charts."""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

import matplotlib
import matplotlib.colors as mcolors

SIGNATURE_COLORS = ["#4C72B0", "#DD8452", "#55A868", "#C44E52", "#8172B3", "#937860"]
PHENOTYPE_COLORS = ["#1B9E77", "#D95F02", "#7570B3", "#E7298A"]


def choose_colors(labels: Sequence[str], base: Optional[List[str]] = None) -> Dict[str, tuple]:
    """Map labels to colors.

    The first labels take the ``base`` palette in order; any further labels
    take colors from the tab20 colormap.

    Args:
        labels: Labels in display order
        base: Base palette (defaults to ``PHENOTYPE_COLORS``)

    Returns:
        Dictionary mapping label to RGBA tuple
    """
    base = PHENOTYPE_COLORS if base is None else base
    labels = list(labels)
    colors = {}

    for i, label in enumerate(labels[: len(base)]):
        colors[label] = mcolors.to_rgba(base[i])

    if len(labels) > len(base):
        extra_cmap = matplotlib.colormaps["tab20"].resampled(len(labels) - len(base))
        for j, label in enumerate(labels[len(base) :]):
            colors[label] = extra_cmap(j)

    return colors
