import math
import random
import re
from dataclasses import dataclass
from typing import Collection, List, Literal, Optional, Tuple

from circuit_challenge.schemas import Cell, Coordinate, DifficultySettings


Operation = Literal["+", "−", "×", "÷"]

MAX_DIVISOR = 12
MAX_DIVIDEND = 1000

# share of tries a marked division cell picks division before falling back to weights
DIVISION_PRIORITY = 0.8

EXPRESSION_PATTERN = re.compile(r"^\s*(\d+)\s*([+\-*/])\s*(\d+)\s*$")


@dataclass
class Expression:
    text: str
    operation: Operation
    operand_a: int
    operand_b: int
    result: int


def select_operation(settings: DifficultySettings) -> Operation:
    """Weighted random pick among the enabled operations"""
    weights = settings.weights
    enabled = []
    if settings.addition_enabled and weights.addition > 0:
        enabled.append(("+", weights.addition))
    if settings.subtraction_enabled and weights.subtraction > 0:
        enabled.append(("−", weights.subtraction))
    if settings.multiplication_enabled and weights.multiplication > 0:
        enabled.append(("×", weights.multiplication))
    if settings.division_enabled and weights.division > 0:
        enabled.append(("÷", weights.division))

    if not enabled:
        return "+"

    operations = [operation for operation, _ in enabled]
    return random.choices(operations, weights=[weight for _, weight in enabled])[0]


def generate_addition(target: int, max_operand: int) -> Optional[Expression]:
    """a + b = target with both operands in [1, max_operand]"""
    if target < 2:
        return None
    min_a = max(1, target - max_operand)
    max_a = min(max_operand, target - 1)
    if min_a > max_a:
        return None
    a = random.randint(min_a, max_a)
    b = target - a
    return Expression(text=f"{a} + {b}", operation="+", operand_a=a, operand_b=b, result=target)


def generate_subtraction(target: int, max_operand: int) -> Optional[Expression]:
    """a − b = target, never negative"""
    if target < 1:
        return None
    max_b = max_operand - target
    if max_b < 1:
        return None
    b = random.randint(1, max_b)
    a = target + b
    return Expression(text=f"{a} − {b}", operation="−", operand_a=a, operand_b=b, result=target)


def generate_multiplication(target: int, max_factor: int) -> Optional[Expression]:
    """a × b = target with both factors in [2, max_factor]"""
    if target < 4:
        return None

    pairs = []
    for a in range(2, min(max_factor, math.isqrt(target)) + 1):
        if target % a == 0 and 2 <= target // a <= max_factor:
            pairs.append((a, target // a))
    if not pairs:
        return None

    a, b = random.choice(pairs)
    if random.random() < 0.5:
        a, b = b, a
    return Expression(text=f"{a} × {b}", operation="×", operand_a=a, operand_b=b, result=target)


def generate_division(target: int, max_divisor: int, max_dividend: int = MAX_DIVIDEND) -> Optional[Expression]:
    """a ÷ b = target built as a = target × b, so the quotient is always whole"""
    if target < 1:
        return None
    divisors = [b for b in range(2, min(max_divisor, MAX_DIVISOR) + 1) if target * b <= max_dividend]
    if not divisors:
        return None
    b = random.choice(divisors)
    a = target * b
    return Expression(text=f"{a} ÷ {b}", operation="÷", operand_a=a, operand_b=b, result=target)


def _fallback_expression(target: int) -> Expression:
    if target == 1:
        return Expression(text="2 − 1", operation="−", operand_a=2, operand_b=1, result=1)
    a = target // 2
    b = target - a
    return Expression(text=f"{a} + {b}", operation="+", operand_a=a, operand_b=b, result=target)


def _enabled_operations(settings: DifficultySettings) -> List[Operation]:
    operations = []
    if settings.addition_enabled:
        operations.append("+")
    if settings.subtraction_enabled:
        operations.append("−")
    if settings.multiplication_enabled:
        operations.append("×")
    if settings.division_enabled:
        operations.append("÷")
    return operations


def _build(operation: Operation, target: int, settings: DifficultySettings) -> Optional[Expression]:
    if operation == "+":
        return generate_addition(target, settings.add_sub_range)
    if operation == "−":
        return generate_subtraction(target, settings.add_sub_range)
    if operation == "×":
        return generate_multiplication(target, settings.mult_div_range)
    return generate_division(target, settings.mult_div_range)


def can_express(target: int, settings: DifficultySettings) -> bool:
    """True if an enabled operation builds target with operands inside the settings' ranges"""
    add_sub, mult_div = settings.add_sub_range, settings.mult_div_range
    if settings.addition_enabled and 2 <= target <= 2 * add_sub:
        return True
    if settings.subtraction_enabled and 1 <= target < add_sub:
        return True
    if settings.multiplication_enabled and any(
        target % a == 0 and 2 <= target // a <= mult_div for a in range(2, mult_div + 1)
    ):
        return True
    return settings.division_enabled and mult_div >= 2 and 1 <= target and target * 2 <= MAX_DIVIDEND


def expressible_values(settings: DifficultySettings, min_value: int, max_value: int) -> List[int]:
    return [value for value in range(min_value, max_value + 1) if can_express(value, settings)]


def generate_expression(target: int, settings: DifficultySettings, prioritize_division: bool = False) -> Expression:
    """Expression evaluating to target, ten weighted tries, then every enabled operation, then a plain fallback"""
    for _ in range(10):
        if prioritize_division and settings.division_enabled and random.random() < DIVISION_PRIORITY:
            operation = "÷"
        else:
            operation = select_operation(settings)

        expression = _build(operation, target, settings)
        if expression:
            return expression

    for operation in _enabled_operations(settings):
        expression = _build(operation, target, settings)
        if expression:
            return expression

    return _fallback_expression(target)


def apply_expressions(
    cells: List[List[Cell]],
    settings: DifficultySettings,
    division_cells: Collection[Coordinate] = (),
) -> List[List[Cell]]:
    """New grid with every cell's expression filled in, FINISH keeps an empty one"""
    grid = []
    for row in cells:
        grid_row = []
        for cell in row:
            if cell.is_finish or cell.answer is None:
                grid_row.append(cell.model_copy(update={"expression": ""}))
                continue
            prioritize = cell.coordinate in division_cells
            text = generate_expression(cell.answer, settings, prioritize_division=prioritize).text
            grid_row.append(cell.model_copy(update={"expression": text}))
        grid.append(grid_row)
    return grid


def parse_expression(expression: str) -> Optional[Tuple[int, str, int]]:
    """(a, operator, b) with the operator in ASCII, None if the text is not "a op b" """
    normalized = expression.replace("−", "-").replace("×", "*").replace("÷", "/")
    match = EXPRESSION_PATTERN.match(normalized)
    if not match:
        return None
    return int(match.group(1)), match.group(2), int(match.group(3))


def evaluate_expression(expression: str) -> Optional[int]:
    """Evaluate "a op b" with Unicode or ASCII operators, None if it is not one"""
    if expression in ("START", "FINISH"):
        return None

    parsed = parse_expression(expression)
    if parsed is None:
        return None

    a, operator, b = parsed
    if operator == "+":
        return a + b
    if operator == "-":
        return a - b
    if operator == "*":
        return a * b
    if b == 0 or a % b != 0:
        return None
    return a // b


def range_errors(expression: str, settings: DifficultySettings) -> List[str]:
    """Reasons the expression breaks the settings: disabled operation or operands out of range"""
    parsed = parse_expression(expression)
    if parsed is None:
        return []

    a, operator, b = parsed
    add_sub, mult_div = settings.add_sub_range, settings.mult_div_range
    if operator == "+":
        if not settings.addition_enabled:
            return ["addition is disabled"]
        if not (1 <= a <= add_sub and 1 <= b <= add_sub):
            return [f"operands must be within 1-{add_sub}"]
    elif operator == "-":
        if not settings.subtraction_enabled:
            return ["subtraction is disabled"]
        if not (1 <= b and a <= add_sub):
            return [f"operands must be within 1-{add_sub}"]
    elif operator == "*":
        if not settings.multiplication_enabled:
            return ["multiplication is disabled"]
        if not (2 <= a <= mult_div and 2 <= b <= mult_div):
            return [f"factors must be within 2-{mult_div}"]
    else:
        if not settings.division_enabled:
            return ["division is disabled"]
        if not (2 <= b <= min(mult_div, MAX_DIVISOR) and a <= MAX_DIVIDEND):
            return [f"divisor must be within 2-{min(mult_div, MAX_DIVISOR)}"]
    return []
