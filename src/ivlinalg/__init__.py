from .function import exp, log, pow, sqrt
from .interval import FloatInterval, Interval
from .linalg import FloatIntervalMatrix, IntervalMatrix, linsolve, solve
from .utility import interval_hull, midpoint, mince, montecarlo, radius

__all__ = [
    "exp",
    "log",
    "pow",
    "sqrt",
    "Interval",
    "FloatInterval",
    "FloatIntervalMatrix",
    "IntervalMatrix",
    "linsolve",
    "solve",
    "interval_hull",
    "midpoint",
    "mince",
    "montecarlo",
    "radius",
]
