import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

import tsplib95

from .errors import InvalidInputError, MalformedGenotypeError
from .geometry import EucPoint, GeoPoint, Point


logger = logging.getLogger(__name__)


@dataclass
class Instance:
    name: str
    path: Path
    points: List[Point]
    optimal_order: Optional[Tuple[int, ...]] = None

    @property
    def dimension(self) -> int:
        return len(self.points)


def load_points(path: Path) -> Tuple[str, List[Point]]:
    path = Path(path)
    try:
        problem = tsplib95.load(str(path))
    except (OSError, ValueError) as exc:
        raise InvalidInputError(f"cannot read TSPLIB instance {path}: {exc}") from exc

    weight_type = problem.edge_weight_type
    coords = problem.node_coords
    if not coords:
        raise InvalidInputError(f"{path} has no NODE_COORD_SECTION")
    points: List[Point] = []
    for order in sorted(coords):
        x, y = coords[order][:2]
        if weight_type == "EUC_2D":
            points.append(EucPoint(order, float(x), float(y)))
        elif weight_type == "GEO":
            points.append(GeoPoint.from_degrees(order, float(x), float(y)))
        else:
            raise InvalidInputError(f"{path}: unsupported EDGE_WEIGHT_TYPE {weight_type!r}")
    if [p.order for p in points] != list(range(1, len(points) + 1)):
        raise InvalidInputError(f"{path}: node numbers must run 1..{len(points)}")
    name = problem.name or path.stem
    return name, points


def load_optimal_tour(path: Path, dimension: int) -> Optional[Tuple[int, ...]]:
    path = Path(path)
    if not path.exists():
        logger.warning("optimal tour %s not found, no reference solution", path)
        return None
    tour_file = tsplib95.parse(path.read_text())
    if not tour_file.tours:
        raise MalformedGenotypeError(f"{path} has no TOUR_SECTION")
    nodes = [int(n) for n in tour_file.tours[0]]
    if sorted(nodes) != list(range(1, dimension + 1)):
        raise MalformedGenotypeError(f"{path} is not a permutation of 1..{dimension}")
    start = nodes.index(1)
    return tuple(nodes[start:] + nodes[:start])


def _solution_candidates(path: Path) -> Iterable[Path]:
    yield path.with_suffix(".opt.tour")
    yield path.parent / "solutions" / f"{path.stem}.opt.tour"


def load_instance(path: Path) -> Instance:
    path = Path(path)
    name, points = load_points(path)
    optimal = None
    for candidate in _solution_candidates(path):
        if candidate.exists():
            optimal = load_optimal_tour(candidate, len(points))
            break
    else:
        logger.warning("no optimal tour next to %s", path)
    return Instance(name=name, path=path, points=points, optimal_order=optimal)


def discover_instances(root: Path) -> List[Path]:
    """``*.tsp`` files directly under ``root`` or one directory below it."""
    root = Path(root)
    if not root.is_dir():
        raise InvalidInputError(f"data root {root} is not a directory")
    found = set(root.glob("*.tsp")) | set(root.glob("*/*.tsp"))
    return sorted(found)


def load_instances(root: Path, indices: Optional[Iterable[int]] = None) -> List[Instance]:
    paths = discover_instances(root)
    if indices is not None:
        chosen = []
        for idx in indices:
            if not 0 <= idx < len(paths):
                raise InvalidInputError(f"no instance with index {idx} under {root}")
            chosen.append(paths[idx])
        paths = chosen
    return [load_instance(p) for p in paths]
