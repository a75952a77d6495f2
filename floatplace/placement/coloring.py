"""
Colour classes for the free-cell graph.

Cells that share no edge can be relaxed independently: within one class no
cell reads a value another cell of the same class writes. Sweeping class by
class therefore gives the same result whether the cells of a class are
updated one after another or concurrently with a barrier between classes.
Fixed cells are read-only and never coloured.
"""

from typing import Dict, List, Tuple

from .equations import EquationSystem


def color_classes(system: EquationSystem) -> List[Tuple[int, ...]]:
    """Greedy colouring in ascending id order.

    Each cell takes the smallest colour not used by an already coloured
    neighbour. Returns the classes in colour order, each in ascending id
    order.
    """
    colors: Dict[int, int] = {}
    for cell in system.order:
        taken = {colors[n] for n, _ in system.neighbors_of(cell) if n in colors}
        color = 0
        while color in taken:
            color += 1
        colors[cell] = color

    num_colors = max(colors.values()) + 1 if colors else 0
    classes: List[List[int]] = [[] for _ in range(num_colors)]
    for cell in system.order:
        classes[colors[cell]].append(cell)
    return [tuple(c) for c in classes]


def colored_order(system: EquationSystem) -> Tuple[int, ...]:
    """Flatten the colour classes into a single sweep order."""
    return tuple(cell for cls in color_classes(system) for cell in cls)
