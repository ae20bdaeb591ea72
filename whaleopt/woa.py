import logging
import math
import numbers
import random
from dataclasses import dataclass
from typing import Any, Callable, Optional

import numpy as np

from whaleopt.evaluator import Objective

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchSpace:
    """Scalar box [lb, ub] applied to every one of `dim` coordinates."""

    lb: float
    ub: float
    dim: int

    def __post_init__(self) -> None:
        if self.dim < 1:
            raise ValueError(f"dim must be >= 1, got {self.dim}")
        # Also rejects NaN bounds.
        if not self.lb <= self.ub:
            raise ValueError(f"lb must be <= ub, got lb={self.lb}, ub={self.ub}")


def _count(name: str, value: Any) -> int:
    if not isinstance(value, numbers.Integral):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    return int(value)


class WOA:
    """
    Whale Optimization Algorithm with a fixed iteration count.

    The population is a (pop_size, dim) array whose row indices never change.
    Row 0 is the reference slot and is not moved by the position update.
    The leader is an owned copy of the best agent seen so far and is only
    replaced, inside `calc_fitness`, by a strictly better score.

    `rng` is any object with `random()` and `randrange(n)` (e.g. a seeded
    `random.Random`). Draws are consumed in a fixed order: the initial
    population row by row, then per iteration and per moved agent
    r1, r2, p, l, followed by one index draw per coordinate when the agent
    searches around a random whale.

    By default the spiral shape factor grows with the iteration index.
    Passing `spiral_shape_const` pins it to that value instead (b=1.0 is the
    textbook formulation).

    Before `execute` the accessors return sentinels: a zero curve, a zero
    leader position and an infinitely bad score.
    """

    def __init__(
        self,
        objective: Callable[[np.ndarray], float],
        pop_size: int,
        lb: float,
        ub: float,
        dim: int,
        max_iter: int,
        minimize: bool = True,
        *,
        rng: Optional[Any] = None,
        spiral_shape_const: Optional[float] = None,
    ) -> None:
        self.space = SearchSpace(float(lb), float(ub), _count("dim", dim))
        self.pop_size = _count("pop_size", pop_size)
        self.max_iter = _count("max_iter", max_iter)
        if self.pop_size < 1:
            raise ValueError(f"pop_size must be >= 1, got {pop_size}")
        if self.max_iter < 1:
            raise ValueError(f"max_iter must be >= 1, got {max_iter}")

        self.objective = Objective(objective)
        self.minimize = bool(minimize)
        self.rng = rng if rng is not None else random.Random()
        self.spiral_shape_const = None if spiral_shape_const is None else float(spiral_shape_const)

        self._curve = np.zeros(self.max_iter)
        self._leader_pos = np.zeros(self.space.dim)
        self._leader_score = math.inf if self.minimize else -math.inf

        self.positions = self._init_population()
        logger.debug(
            "WOA: pop_size=%d dim=%d bounds=[%g, %g] max_iter=%d minimize=%s",
            self.pop_size, self.space.dim, self.space.lb, self.space.ub, self.max_iter, self.minimize,
        )

    def _init_population(self) -> np.ndarray:
        lb, ub = self.space.lb, self.space.ub
        pop = np.empty((self.pop_size, self.space.dim))
        for i in range(self.pop_size):
            for j in range(self.space.dim):
                pop[i, j] = lb + self.rng.random() * (ub - lb)
        return pop

    def adjust_positions(self, i: int) -> None:
        """Clamp agent `i` into the search box, in place."""
        np.clip(self.positions[i], self.space.lb, self.space.ub, out=self.positions[i])

    def is_better(self, fitness: float) -> bool:
        # NaN compares false both ways, so it can never take the lead.
        if self.minimize:
            return fitness < self._leader_score
        return fitness > self._leader_score

    def calc_fitness(self) -> None:
        for i in range(self.pop_size):
            self.adjust_positions(i)
            fitness = self.objective(self.positions[i])

            if self.is_better(fitness):
                logger.debug("leader replaced by agent %d: %r -> %r", i, self._leader_score, fitness)
                self._leader_score = fitness
                self._leader_pos[:] = self.positions[i]

    def spiral_factor(self, it: int) -> float:
        if self.spiral_shape_const is not None:
            return self.spiral_shape_const
        return 1.0 + it / 100.0 + (it % 2.25) * it / self.max_iter

    def update_position(self, a: float, a2: float, it: int) -> None:
        """
        Move agents 1..pop_size-1 for iteration `it`.

        One set of (A, C, p, l) is drawn per agent and shared by all of its
        coordinates. Results are left unclamped; the next `calc_fitness`
        pulls them back into the box.
        """
        pop = self.positions
        leader = self._leader_pos
        dim = self.space.dim
        cols = np.arange(dim)
        b = self.spiral_factor(it)

        for i in range(1, self.pop_size):
            r1, r2 = self.rng.random(), self.rng.random()
            A, C = 2.0 * a * r1 - a, 2.0 * r2
            p = self.rng.random()
            l = (a2 - 1.0) * self.rng.random() + 1.0

            x = pop[i].copy()
            if p < 0.5:
                if abs(A) < 1:
                    D = np.abs(C * leader - x)
                    pop[i] = leader - A * D
                else:
                    # Live population: rows before i have already moved this pass.
                    rand_idx = [self.rng.randrange(self.pop_size) for _ in range(dim)]
                    rand_pos = pop[rand_idx, cols]
                    D = np.abs(C * rand_pos - x)
                    pop[i] = rand_pos - A * D
            else:
                D = np.abs(leader - x)
                # exp(b*l) overflows to inf on long runs; calc_fitness clamps +-inf,
                # and 0*inf (agent already on the leader) stays on the leader.
                with np.errstate(over="ignore", invalid="ignore"):
                    x_new = D * np.exp(b * l) * math.cos(2 * math.pi * l) + leader
                pop[i] = np.where(np.isnan(x_new), leader, x_new)

    def execute(self) -> np.ndarray:
        """Run `max_iter` iterations plus a final scoring pass; return the leader position."""
        for it in range(self.max_iter):
            self.calc_fitness()
            self._curve[it] = self._leader_score

            # a: 2 -> 0, a2: -1 -> -2
            a = 2.0 - it * (2.0 / self.max_iter)
            a2 = -1.0 + it * (-1.0 / self.max_iter)

            self.update_position(a, a2, it)
            logger.debug("iter %d/%d best=%r", it + 1, self.max_iter, self._leader_score)

        self.calc_fitness()
        logger.debug("done after %d evaluations, best=%r", self.objective.calls, self._leader_score)
        return self._leader_pos.copy()

    @property
    def convergence_curve(self) -> np.ndarray:
        return self._curve.copy()

    @property
    def leader_pos(self) -> np.ndarray:
        return self._leader_pos.copy()

    @property
    def optimal_score(self) -> float:
        return float(self._leader_score)

    @property
    def evaluations(self) -> int:
        return self.objective.calls

    @property
    def population(self) -> np.ndarray:
        return self.positions.copy()
