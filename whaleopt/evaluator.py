import numpy as np


class Objective:
    """
    Wraps the user objective so every invocation is counted. The objective
    gets a copy of the agent, so writing into its argument cannot move the
    population. Bounds are not enforced here; callers clamp first.
    """
    def __init__(self, func):
        if not callable(func):
            raise TypeError(f"objective must be callable, got {type(func).__name__}")
        self.func = func
        self.calls = 0

    def evaluate(self, x):
        val = self.func(np.array(x, dtype=float, copy=True))
        self.calls += 1
        return float(val)

    def __call__(self, x):
        return self.evaluate(x)
