import random
from abc import ABC, abstractmethod
from typing import Generic, List, Optional, Sequence, TypeVar

from ..context import SolverContext
from ..errors import IllegalConfigurationError
from ..tour import Tour


class Operator(ABC):
    """An operator of any kind, carrying the integer weight used to pick it among its peers."""

    name: str = "operator"
    kind: str = "operator"

    def __init__(self, weight: int = 1, rng: Optional[random.Random] = None):
        if isinstance(weight, bool) or not isinstance(weight, int) or weight <= 0:
            raise IllegalConfigurationError(f"{self.name} weight must be a positive integer, got {weight!r}")
        self.weight = weight
        self.rng = rng or random.Random()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(weight={self.weight})"


class GeneratingOperator(Operator):
    kind = "generating"

    @abstractmethod
    def generate(self, context: SolverContext) -> Tour:
        raise NotImplementedError


class CrossoverOperator(Operator):
    kind = "crossover"

    @abstractmethod
    def crossover(self, context: SolverContext, first: Tour, second: Tour) -> List[Tour]:
        raise NotImplementedError


class MutationOperator(Operator):
    kind = "mutation"

    @abstractmethod
    def mutate(self, context: SolverContext, tour: Tour) -> Tour:
        raise NotImplementedError


class SelectionOperator(Operator):
    kind = "selection"

    @abstractmethod
    def select(self, context: SolverContext, tours: Sequence[Tour], target_size: int) -> List[Tour]:
        raise NotImplementedError


O = TypeVar("O", bound=Operator)


class OperatorTable(Generic[O]):
    """Operators of one kind with their weights normalized into chances."""

    def __init__(self, operators: Sequence[O], kind: str = "operator"):
        if not operators:
            raise IllegalConfigurationError(f"at least one {kind} operator is required")
        self.operators: List[O] = list(operators)
        total = sum(op.weight for op in self.operators)
        self.chances: List[float] = [op.weight / total for op in self.operators]

    def choose(self, rng: random.Random) -> O:
        p = rng.random()
        for op, chance in zip(self.operators, self.chances):
            if p < chance:
                return op
            p -= chance
        return self.operators[0]

    def __len__(self) -> int:
        return len(self.operators)

    def __iter__(self):
        return iter(zip(self.operators, self.chances))
