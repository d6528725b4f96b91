# collatz.py
import operator

MAX_STEPS = 1_000_000


class StepLimitExceeded(RuntimeError):
    def __init__(self, number, max_steps):
        super().__init__(f"Exceeded maximum number of steps ({max_steps}) for number {number}")
        self.number = number
        self.max_steps = max_steps


def compute_steps(n, max_steps=MAX_STEPS):
    """
    Number of halve-or-3n+1 steps needed for `n` to reach 1.
    Raises StepLimitExceeded once more than `max_steps` steps were taken.
    """
    n = operator.index(n)
    if n < 1:
        raise ValueError(f"Collatz steps are defined for positive integers, got {n}")
    start = n
    steps = 0
    while n != 1:
        if n % 2 == 0:
            n //= 2
        else:
            n = 3 * n + 1
        steps += 1
        if steps > max_steps:
            raise StepLimitExceeded(start, max_steps)
    return steps
