"""
Hybrid genetic algorithm for the TSP: construction heuristics seed the
population, elitist retention guards every evolution stage.
"""

__all__ = [
    "context",
    "data",
    "errors",
    "evolutionary",
    "geometry",
    "operators",
    "runner",
    "tour",
]
