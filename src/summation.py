"""
Three ways to sum the integers 1..n
"""


def _check(n: int) -> None:
    if n < 1:
        raise ValueError(f"n must be >= 1, got {n}")


def sum_to_n_iterative(n: int) -> int:
    """Loop over 1..n. O(n)."""
    _check(n)
    total = 0
    for i in range(1, n + 1):
        total += i
    return total


def sum_to_n_closed_form(n: int) -> int:
    """n * (n + 1) / 2. O(1)."""
    _check(n)
    return n * (n + 1) // 2


def sum_to_n_recursive(n: int) -> int:
    """n + sum(1..n-1). O(n) time and stack depth, so n is bounded by the recursion limit."""
    _check(n)
    if n == 1:
        return 1
    return n + sum_to_n_recursive(n - 1)
