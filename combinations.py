"""
Модуль combinations.py - розклад попарних порівнянь

Реалізує:
- Пару елементів зі стабільним порядком лівий/правий
- Генерацію всіх невпорядкованих пар (без повторів і порівнянь із собою)
"""

from dataclasses import dataclass
from typing import List, Sequence

from errors import InvalidUniverse


@dataclass(frozen=True)
class Pair:
    """Пара елементів для порівняння (порядок лише для показу)"""
    left: str
    right: str

    def __contains__(self, item: str) -> bool:
        return item == self.left or item == self.right

    def other(self, item: str) -> str:
        """
        Повертає другий елемент пари

        Examples:
            >>> Pair("a", "b").other("a")
            'b'
        """
        if item == self.left:
            return self.right
        if item == self.right:
            return self.left
        raise ValueError(f"Елемент {item!r} не належить до пари {self.left!r} / {self.right!r}")

    def as_tuple(self):
        return (self.left, self.right)


def check_universe(items: Sequence[str]) -> None:
    """Перевіряє, що елементи попарно різні"""
    seen = set()
    for item in items:
        if item in seen:
            raise InvalidUniverse(f"Елемент {item!r} повторюється")
        seen.add(item)


def generate_combinations(items: Sequence[str]) -> List[Pair]:
    """
    Генерує всі пари i<j у лексикографічному порядку індексів.

    Args:
        items: Впорядкований список різних елементів

    Returns:
        Список із N*(N-1)/2 пар (items[i], items[j])

    Examples:
        >>> [p.as_tuple() for p in generate_combinations(["a", "b", "c"])]
        [('a', 'b'), ('a', 'c'), ('b', 'c')]
        >>> generate_combinations([])
        []
    """
    check_universe(items)

    pairs = []
    for i in range(len(items)):
        for j in range(i + 1, len(items)):
            pairs.append(Pair(items[i], items[j]))
    return pairs


def count_combinations(n: int) -> int:
    """
    Examples:
        >>> count_combinations(4)
        6
    """
    if n < 2:
        return 0
    return n * (n - 1) // 2
