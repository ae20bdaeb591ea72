from whaleopt.evaluator import Objective
from whaleopt.woa import WOA, SearchSpace

__all__ = ["Objective", "SearchSpace", "WOA"]
