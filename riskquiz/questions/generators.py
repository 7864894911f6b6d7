"""Question generators for the two treatment arms.

A question generator is any callable that takes no required arguments and
returns a :class:`Question`. Experiments map each group to a generator via
``ExperimentConfig.questions()``; the defaults give group A multi-step
algebra (``complex_question``) and group B single-digit addition
(``simple_question``).
"""

from __future__ import annotations

import dataclasses
import math
from typing import Callable

import numpy as np

from riskquiz.configurations import configuration_constants


@dataclasses.dataclass(frozen=True)
class Question:
    question_text: str
    options: list[int]
    correct_answer: int

    def to_payload(self) -> dict:
        return {
            "question_text": self.question_text,
            "options": [int(o) for o in self.options],
            "correct_answer": int(self.correct_answer),
        }


QuestionGenerator = Callable[[], Question]

COMPLEX_QUESTION_TYPES = ("quadratic", "derivative", "algebraic", "exponent", "equation")


def _signed(value: int) -> str:
    return f"+{value}" if value >= 0 else f"{value}"


def _round_half_up(value: float) -> int:
    """Round to the nearest integer, with halves going up (2.5 -> 3, -2.5 -> -2)."""
    return math.floor(value + 0.5)


def _quadratic(rng: np.random.Generator) -> tuple[str, int]:
    a = int(rng.integers(1, 4))
    b = int(rng.integers(-5, 5))
    c = int(rng.integers(-5, 5))

    discriminant = b * b - 4 * a * c
    if discriminant < 0:
        # No real roots; fall back to a fixed question with a clean root.
        return "Solve for x: x² - 9 = 0", 3

    x1 = _round_half_up((-b + math.sqrt(discriminant)) / (2 * a))
    x2 = _round_half_up((-b - math.sqrt(discriminant)) / (2 * a))
    return f"Solve for x: {a}x² {_signed(b)}x {_signed(c)} = 0", max(x1, x2)


def _derivative(rng: np.random.Generator) -> tuple[str, int]:
    n = int(rng.integers(2, 7))
    x = int(rng.integers(1, 5))
    return f"If f(x) = x^{n}, what is f'({x})?", n * x ** (n - 1)


def _algebraic(rng: np.random.Generator) -> tuple[str, int]:
    a = int(rng.integers(2, 10))
    b = int(rng.integers(-10, 10))
    c = int(rng.integers(10, 40))
    return f"Solve for x: {a}x {_signed(b)} = {c}", _round_half_up((c - b) / a)


def _exponent(rng: np.random.Generator) -> tuple[str, int]:
    x = int(rng.integers(2, 8))
    return f"Solve for x: 2^x = {2 ** x}", x


def _equation(rng: np.random.Generator) -> tuple[str, int]:
    x = int(rng.integers(1, 6))
    y = int(rng.integers(1, 6))
    return f"If x + y = {x + y} and y = {y}, what is x?", x


_COMPLEX_BUILDERS = {
    "quadratic": _quadratic,
    "derivative": _derivative,
    "algebraic": _algebraic,
    "exponent": _exponent,
    "equation": _equation,
}


def _near_miss_options(answer: int, rng: np.random.Generator) -> list[int]:
    """Build the answer plus three distinct plausible distractors, shuffled."""
    options = [answer]
    used = {answer}

    while len(options) < configuration_constants.NUM_OPTIONS:
        if rng.random() < 0.5:
            wrong = answer + int(rng.integers(-4, 4))
        else:
            wrong = _round_half_up(answer * (0.5 + rng.random()))

        if wrong not in used:
            options.append(wrong)
            used.add(wrong)

    return [int(o) for o in rng.permutation(options)]


def complex_question(rng: np.random.Generator | None = None) -> Question:
    """Generate a multi-step algebra question with close distractors."""
    rng = rng if rng is not None else np.random.default_rng()

    question_type = COMPLEX_QUESTION_TYPES[int(rng.integers(len(COMPLEX_QUESTION_TYPES)))]
    question_text, answer = _COMPLEX_BUILDERS[question_type](rng)

    return Question(
        question_text=question_text,
        options=_near_miss_options(answer, rng),
        correct_answer=answer,
    )


def simple_question(rng: np.random.Generator | None = None) -> Question:
    """Generate a single-digit addition with obviously wrong distractors.

    The correct answer is always listed first.
    """
    rng = rng if rng is not None else np.random.default_rng()

    num1 = int(rng.integers(1, 10))
    num2 = int(rng.integers(1, 10))
    answer = num1 + num2

    candidates = [answer - 5, answer + 3, answer + 7, answer + 11]
    wrong = [v for v in candidates if v > 0 and v != answer]
    wrong = wrong[: configuration_constants.NUM_OPTIONS - 1]

    return Question(
        question_text=f"{num1} + {num2}",
        options=[answer] + [int(o) for o in rng.permutation(wrong)],
        correct_answer=answer,
    )


DEFAULT_GENERATORS: dict[str, QuestionGenerator] = {
    configuration_constants.Groups.GroupA: complex_question,
    configuration_constants.Groups.GroupB: simple_question,
}
