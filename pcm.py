"""
Модуль pcm.py - побудова матриць попарних порівнянь (МПП) з відповідей
Базується на методі аналізу ієрархій Сааті

Реалізує:
- Побудову МПП з журналу відповідей з часом рішення
- Перевірку зворотної симетрії (a_ji = 1/a_ij)
- Підтримку неповних МПП (непорівняні пари = 1)
- Перевірку зв'язності графу порівнянь
"""

import numpy as np
from typing import Dict, List, Tuple, Optional, Sequence
from enum import Enum

from combinations import check_universe
from errors import EmptyUniverse, MalformedResponse
from scales import LatencyScale
from session import Response


class PCMStatus(Enum):
    """Статус матриці попарних порівнянь"""
    EMPTY = "empty"
    INCOMPLETE = "incomplete"
    COMPLETE = "complete"


class PairwiseComparisonMatrix:
    """
    Матриця попарних порівнянь (МПП/PCM) над фіксованим порядком елементів.
    Непорівняні пари мають нейтральне значення 1.
    """

    def __init__(self, alternatives: Sequence[str], scale: Optional[LatencyScale] = None):
        """
        Ініціалізація МПП

        Args:
            alternatives: Впорядкований список елементів (рядки/стовпці)
            scale: Шкала затримка -> інтенсивність

        Examples:
            >>> pcm = PairwiseComparisonMatrix(["A1", "A2", "A3"])
            >>> pcm.n_alternatives
            3
        """
        if len(alternatives) == 0:
            raise EmptyUniverse("Немає елементів для порівняння")
        check_universe(alternatives)

        self.alternatives = list(alternatives)
        self.n_alternatives = len(self.alternatives)
        self.index: Dict[str, int] = {alt: i for i, alt in enumerate(self.alternatives)}
        self.scale = scale if scale is not None else LatencyScale()

        # Нейтральна МПП: всі елементи 1
        self.matrix = np.ones((self.n_alternatives, self.n_alternatives))

        # Маска заповнених елементів (True якщо відповідь отримана)
        self.filled_mask = np.zeros((self.n_alternatives, self.n_alternatives), dtype=bool)
        # Діагональ завжди заповнена одиницями
        np.fill_diagonal(self.filled_mask, True)

    def covers(self, response: Response) -> bool:
        """Чи належать обидва елементи пари до множини"""
        return response.pair.left in self.index and response.pair.right in self.index

    def add_response(self, response: Response) -> bool:
        """
        Додає відповідь: a_ij = s, a_ji = 1/s, де i - обраний елемент.
        Пізніша відповідь на ту саму пару перезаписує попередню.

        Args:
            response: Відповідь користувача

        Returns:
            True якщо відповідь врахована, False якщо пара поза множиною

        Examples:
            >>> from combinations import Pair
            >>> pcm = PairwiseComparisonMatrix(["A1", "A2"])
            >>> pcm.add_response(Response(Pair("A1", "A2"), "A1", 0.0))
            True
            >>> float(pcm.matrix[0, 1]), round(float(pcm.matrix[1, 0]), 4)
            (9.0, 0.1111)
        """
        if response.selected not in response.pair:
            raise MalformedResponse(
                f"Обраний елемент {response.selected!r} не належить до пари "
                f"{response.pair.left!r} / {response.pair.right!r}"
            )

        if not self.covers(response):
            return False

        i = self.index[response.selected]
        j = self.index[response.other]
        if i == j:
            raise MalformedResponse("Неможливо порівняти елемент сам з собою")

        intensity = self.scale.intensity(response.response_time)

        # Встановлюємо оцінку та обернену (зворотна симетрія)
        self.matrix[i, j] = intensity
        self.matrix[j, i] = 1.0 / intensity
        self.filled_mask[i, j] = True
        self.filled_mask[j, i] = True
        return True

    def get_status(self) -> PCMStatus:
        """
        Визначає статус заповненості МПП

        Returns:
            Статус матриці (EMPTY, INCOMPLETE, COMPLETE)

        Examples:
            >>> pcm = PairwiseComparisonMatrix(["A1", "A2"])
            >>> pcm.get_status()
            <PCMStatus.EMPTY: 'empty'>
        """
        # Рахуємо заповнені елементи (без діагоналі)
        n_filled = int(np.sum(self.filled_mask)) - self.n_alternatives
        n_required = self.n_alternatives * (self.n_alternatives - 1)

        if n_filled == 0 and n_required > 0:
            return PCMStatus.EMPTY
        elif n_filled < n_required:
            return PCMStatus.INCOMPLETE
        else:
            return PCMStatus.COMPLETE

    def check_connectivity(self) -> bool:
        """
        Перевіряє зв'язність графу порівнянь (важливо для неповних МПП)

        Returns:
            True якщо граф зв'язний, False інакше
        """
        adjacency = self.filled_mask.copy()
        np.fill_diagonal(adjacency, False)

        visited = {0}
        stack = [0]
        while stack:
            node = stack.pop()
            for neighbor in np.flatnonzero(adjacency[node]):
                neighbor = int(neighbor)
                if neighbor not in visited:
                    visited.add(neighbor)
                    stack.append(neighbor)

        return len(visited) == self.n_alternatives

    def get_missing_comparisons(self) -> List[Tuple[str, str]]:
        """
        Повертає список відсутніх порівнянь

        Examples:
            >>> pcm = PairwiseComparisonMatrix(["A1", "A2", "A3"])
            >>> len(pcm.get_missing_comparisons())
            3
        """
        missing = []
        for i in range(self.n_alternatives):
            for j in range(i + 1, self.n_alternatives):
                if not self.filled_mask[i, j]:
                    missing.append((self.alternatives[i], self.alternatives[j]))
        return missing

    def to_dict(self) -> dict:
        """
        Стан заповненості МПП для звіту (самі значення експортуються в CSV)

        Examples:
            >>> PairwiseComparisonMatrix(["A1", "A2"]).to_dict()['missing_comparisons']
            [['A1', 'A2']]
        """
        return {
            'alternatives': self.alternatives,
            'status': self.get_status().value,
            'is_connected': self.check_connectivity(),
            'missing_comparisons': [list(pair) for pair in self.get_missing_comparisons()],
        }

    @staticmethod
    def from_responses(alternatives: Sequence[str],
                       responses: Sequence[Response],
                       scale: Optional[LatencyScale] = None) -> 'PairwiseComparisonMatrix':
        """
        Створює МПП зі списку відповідей.
        Відповіді з елементами поза множиною ігноруються.

        Args:
            alternatives: Впорядкований список елементів
            responses: Журнал відповідей
            scale: Шкала затримка -> інтенсивність

        Returns:
            Заповнена МПП
        """
        pcm = PairwiseComparisonMatrix(alternatives, scale)

        for response in responses:
            pcm.add_response(response)

        return pcm


def build_comparison_matrix(responses: Sequence[Response],
                            universe: Sequence[str],
                            scale: Optional[LatencyScale] = None) -> np.ndarray:
    """
    Будує обернено-симетричну МПП N x N з відповідей.

    Args:
        responses: Журнал відповідей
        universe: Впорядкований список елементів
        scale: Шкала затримка -> інтенсивність

    Returns:
        Матриця попарних порівнянь

    Examples:
        >>> build_comparison_matrix([], ["a", "b", "c"]).tolist()
        [[1.0, 1.0, 1.0], [1.0, 1.0, 1.0], [1.0, 1.0, 1.0]]
    """
    return PairwiseComparisonMatrix.from_responses(universe, responses, scale).matrix
