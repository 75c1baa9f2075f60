"""
Arithmetic expression synthesis for puzzle cells.
"""

import math
from typing import List, Optional, Set, Tuple

from .. import config
from ..core.expression import Expression, make_expression
from ..core.puzzle import Cell, DifficultySettings, Operation
from ..core.utils import make_rng, random_choice, RandomSource


def factor_pairs(target: int, max_factor: int) -> List[Tuple[int, int]]:
    """Pairs (a, b) with a <= b, a * b == target and both in [2, max_factor]"""
    upper = min(max_factor, math.isqrt(target)) if target > 0 else 0
    pairs = []
    for a in range(2, upper + 1):
        if target % a == 0:
            b = target // a
            if 2 <= b <= max_factor:
                pairs.append((a, b))
    return pairs


def multiplication_boost(target: int, max_factor: int) -> float:
    """
    Probability of forcing multiplication for a target.

    Zero unless the target has a factor pair in range; otherwise 0.40 up
    to 25, rising linearly to 0.60 at 50 and above.
    """
    if not factor_pairs(target, max_factor):
        return 0.0
    if target <= 25:
        return 0.40
    if target >= 50:
        return 0.60
    return 0.40 + (target - 25) * 0.008


class ExpressionGenerator:
    """Builds expressions that evaluate to a given target"""

    def __init__(self, rng: RandomSource = None):
        self.rng = make_rng(rng)

    # Operation selection

    def select_operation(self, settings: DifficultySettings) -> Operation:
        """Weighted pick among the enabled operations"""
        enabled = settings.enabled_operations
        weighted = [(op, settings.weights.weight_for(op)) for op in enabled
                    if settings.weights.weight_for(op) > 0]
        if not weighted:
            if not enabled:
                return Operation.ADDITION
            weighted = [(op, 1) for op in enabled]

        total = sum(weight for _, weight in weighted)
        pick = int(self.rng.integers(total))
        for op, weight in weighted:
            pick -= weight
            if pick < 0:
                return op
        return weighted[0][0]

    def _choose_operation(self, target: int, settings: DifficultySettings,
                          prioritize_division: bool) -> Operation:
        if (prioritize_division and settings.division_enabled
                and target <= settings.mult_div_range):
            if self.rng.random() < config.DIVISION_PRIORITY:
                return Operation.DIVISION
        elif settings.multiplication_enabled and not prioritize_division:
            boost = multiplication_boost(target, settings.mult_div_range)
            if boost > 0 and self.rng.random() < boost:
                return Operation.MULTIPLICATION
        return self.select_operation(settings)

    # Individual operations

    def addition(self, target: int, max_operand: int) -> Optional[Expression]:
        """a + b = target with both operands in [1, max_operand]"""
        if target < 2:
            return None
        low = max(1, target - max_operand)
        high = min(max_operand, target - 1)
        if low > high:
            return None

        a = int(self.rng.integers(low, high + 1))
        return make_expression(a, Operation.ADDITION, target - a, target)

    def subtraction(self, target: int, max_operand: int) -> Optional[Expression]:
        """a − b = target; b in [1, max_operand - target] so a never exceeds max_operand"""
        if target < 1:
            return None
        max_b = max_operand - target
        if max_b < 1:
            return None

        b = int(self.rng.integers(1, max_b + 1))
        return make_expression(target + b, Operation.SUBTRACTION, b, target)

    def multiplication(self, target: int, max_factor: int) -> Optional[Expression]:
        """a × b = target with both factors in [2, max_factor]"""
        pairs = factor_pairs(target, max_factor)
        if not pairs:
            return None

        a, b = random_choice(self.rng, pairs)
        if self.rng.random() < 0.5:
            a, b = b, a
        return make_expression(a, Operation.MULTIPLICATION, b, target)

    def division(self, target: int, max_divisor: int,
                 max_dividend: int = config.MAX_DIVIDEND) -> Optional[Expression]:
        """a ÷ b = target with b in [2, min(max_divisor, 14)] and a = target * b"""
        if target < 1:
            return None
        divisors = [b for b in range(2, min(max_divisor, config.MAX_DIVISOR) + 1)
                    if target * b <= max_dividend]
        if not divisors:
            return None

        b = random_choice(self.rng, divisors)
        return make_expression(target * b, Operation.DIVISION, b, target)

    # Main entry point

    def generate(self, target: int, settings: DifficultySettings,
                 prioritize_division: bool = False) -> Expression:
        """
        Generate an expression that evaluates to target.

        Never fails for target >= 1: after the retry budget it falls back
        to "2 − 1" for 1 and an even addition split otherwise.
        """
        if target < 1:
            raise ValueError(f"Expression target must be positive, got {target}")

        for _ in range(config.EXPRESSION_MAX_TRIES):
            operation = self._choose_operation(target, settings, prioritize_division)

            expression = None
            if operation is Operation.ADDITION:
                expression = self.addition(target, settings.add_sub_range)
            elif operation is Operation.SUBTRACTION:
                expression = self.subtraction(target, settings.add_sub_range)
            elif operation is Operation.MULTIPLICATION:
                expression = self.multiplication(target, settings.mult_div_range)
            elif target <= settings.mult_div_range:
                expression = self.division(target, settings.mult_div_range)

            if expression is not None:
                return expression

        if target == 1:
            return make_expression(2, Operation.SUBTRACTION, 1, 1)

        a = target // 2
        return make_expression(a, Operation.ADDITION, target - a, target)

    def apply_expressions(self, cells: List[List[Cell]], settings: DifficultySettings,
                          division_cells: Optional[Set[str]] = None):
        """Fill in every cell's expression in place; FINISH stays empty"""
        division_cells = division_cells or set()

        for row in cells:
            for cell in row:
                if cell.is_finish or cell.answer is None:
                    cell.expression = ""
                    continue
                prioritize = cell.coordinate.key in division_cells
                cell.expression = self.generate(cell.answer, settings, prioritize).text


def generate_expression(target: int, settings: DifficultySettings,
                        prioritize_division: bool = False,
                        rng: RandomSource = None) -> Expression:
    """Functional wrapper around ExpressionGenerator.generate"""
    return ExpressionGenerator(rng).generate(target, settings, prioritize_division)
