"""
Модуль consistency.py - вектор пріоритетів та оцінка узгодженості МПП
Базується на методі власного вектора Сааті

Реалізує:
- Розрахунок головного власного вектора степеневим методом
- Спектральний показник узгодженості (λ_max)
- Індекс узгодженості (CI) та відношення узгодженості (CR)
- Ранжування елементів за пріоритетами
"""

import numpy as np
from typing import Dict, List, Sequence, Tuple
from scipy.linalg import eigvals
import warnings

# Випадковий індекс (Random Index) для різних розмірів матриць
# Стандартні значення Сааті
RANDOM_INDEX = {
    1: 0.00,
    2: 0.00,
    3: 0.58,
    4: 0.90,
    5: 1.12,
    6: 1.24,
    7: 1.32,
    8: 1.41,
    9: 1.45,
    10: 1.49,
    11: 1.51,
    12: 1.48,
    13: 1.56,
    14: 1.57,
    15: 1.59,
}

CONSISTENCY_THRESHOLD = 0.10

DEFAULT_TOLERANCE = 1e-8
DEFAULT_MAX_ITERATIONS = 1000


def _as_square(matrix) -> np.ndarray:
    matrix = np.asarray(matrix, dtype=float)
    if matrix.size == 0:
        return matrix.reshape(0, 0)
    if matrix.ndim != 2 or matrix.shape[0] != matrix.shape[1]:
        raise ValueError(f"Очікується квадратна матриця, отримано форму {matrix.shape}")
    return matrix


def _normalize(vector: np.ndarray) -> np.ndarray:
    """Нормалізація за сумою (L1); невдала нормалізація дає рівномірний вектор"""
    n = len(vector)
    vector = np.clip(vector, 0.0, None)
    total = vector.sum()
    if not np.isfinite(total) or total <= 0:
        return np.full(n, 1.0 / n)
    return vector / total


def power_iteration(matrix,
                    tolerance: float = DEFAULT_TOLERANCE,
                    max_iterations: int = DEFAULT_MAX_ITERATIONS) -> Tuple[np.ndarray, int, bool]:
    """
    Степеневий метод: v_{k+1} = M v_k / sum(M v_k), починаючи з (1/N, ..., 1/N).
    Зупинка коли L1-відстань між ітераціями < tolerance або після max_iterations.

    Args:
        matrix: Матриця попарних порівнянь (n x n)
        tolerance: Допуск збіжності
        max_iterations: Максимальна кількість ітерацій

    Returns:
        (вектор пріоритетів, кількість ітерацій, чи досягнуто збіжності)

    Examples:
        >>> weights, iterations, converged = power_iteration(np.ones((3, 3)))
        >>> weights.tolist(), converged
        ([0.3333333333333333, 0.3333333333333333, 0.3333333333333333], True)
    """
    matrix = _as_square(matrix)
    n = matrix.shape[0]

    if n == 0:
        return np.zeros(0), 0, True
    if n == 1:
        return np.ones(1), 0, True

    # Нульові рядки замінюємо нейтральними (уникнення ділення на нуль)
    matrix = matrix.copy()
    zero_rows = ~np.any(matrix != 0, axis=1)
    matrix[zero_rows] = 1.0

    uniform = np.full(n, 1.0 / n)
    weights = uniform

    for iteration in range(1, max_iterations + 1):
        with warnings.catch_warnings():
            warnings.simplefilter("ignore")
            product = matrix @ weights
        total = product.sum()

        if not np.isfinite(total) or total <= 0:
            return uniform, iteration, False

        new_weights = product / total
        delta = np.abs(new_weights - weights).sum()
        weights = new_weights

        if delta < tolerance:
            return _normalize(weights), iteration, True

    return _normalize(weights), max_iterations, False


def extract_priority(matrix,
                     tolerance: float = DEFAULT_TOLERANCE,
                     max_iterations: int = DEFAULT_MAX_ITERATIONS) -> np.ndarray:
    """
    Розраховує вектор пріоритетів (нормалізований головний власний вектор).

    Args:
        matrix: Матриця попарних порівнянь (n x n)
        tolerance: Допуск збіжності
        max_iterations: Максимальна кількість ітерацій

    Returns:
        Вектор пріоритетів (сума = 1)

    Examples:
        >>> weights = extract_priority(np.array([[1, 9], [1/9, 1]]))
        >>> [round(w, 6) for w in weights.tolist()]
        [0.9, 0.1]
        >>> extract_priority(np.ones((1, 1))).tolist()
        [1.0]
    """
    weights, _, _ = power_iteration(matrix, tolerance, max_iterations)
    return weights


def calculate_lambda_max(matrix: np.ndarray) -> float:
    """
    Розраховує максимальне власне значення λ_max матриці.

    Args:
        matrix: Матриця попарних порівнянь (n x n)

    Returns:
        Максимальне власне значення λ_max

    Examples:
        >>> matrix = np.array([[1, 3, 5], [1/3, 1, 3], [1/5, 1/3, 1]])
        >>> lambda_max = calculate_lambda_max(matrix)
        >>> 3.0 <= lambda_max <= 3.1
        True
    """
    matrix = _as_square(matrix)
    if matrix.shape[0] == 0:
        return 0.0

    with warnings.catch_warnings():
        warnings.simplefilter("ignore")
        eigenvalues = eigvals(matrix)

    # Беремо дійсну частину максимального власного значення
    lambda_max = np.max(np.real(eigenvalues))

    return float(lambda_max)


def calculate_consistency_index(matrix: np.ndarray) -> float:
    """
    Розраховує індекс узгодженості (CI - Consistency Index).
    Формула: CI = (λ_max - n) / (n - 1)

    Examples:
        >>> ci = calculate_consistency_index(np.ones((3, 3)))
        >>> abs(ci) < 0.01
        True
    """
    matrix = _as_square(matrix)
    n = matrix.shape[0]

    if n <= 1:
        return 0.0

    lambda_max = calculate_lambda_max(matrix)
    ci = (lambda_max - n) / (n - 1)

    return float(ci)


def calculate_consistency_ratio(matrix: np.ndarray) -> float:
    """
    Розраховує відношення узгодженості (CR - Consistency Ratio).
    Формула: CR = CI / RI
    """
    matrix = _as_square(matrix)
    n = matrix.shape[0]

    if n <= 2:
        return 0.0

    ci = calculate_consistency_index(matrix)
    ri = RANDOM_INDEX.get(n, 1.59)

    if ri == 0:
        return 0.0

    return float(ci / ri)


def consistency_spectral(matrix: np.ndarray) -> Dict[str, float]:
    """
    Комплексна оцінка узгодженості з використанням спектральних показників.

    Args:
        matrix: Матриця попарних порівнянь (n x n)

    Returns:
        Словник з показниками: lambda_max, CI, CR, is_consistent

    Examples:
        >>> result = consistency_spectral(np.array([[1, 3], [1/3, 1]]))
        >>> result['is_consistent']
        True
    """
    matrix = _as_square(matrix)
    n = matrix.shape[0]
    lambda_max = calculate_lambda_max(matrix)
    ci = calculate_consistency_index(matrix)
    cr = calculate_consistency_ratio(matrix)

    return {
        'lambda_max': float(lambda_max),
        'n': n,
        'CI': float(ci),
        'CR': float(cr),
        'RI': RANDOM_INDEX.get(n, 1.59),
        'is_consistent': bool(cr < CONSISTENCY_THRESHOLD),
        'threshold': CONSISTENCY_THRESHOLD,
    }


def rank_weights(weights: Sequence[float], alternatives: Sequence[str]) -> List[Dict]:
    """
    Ранжує елементи за ваговими коефіцієнтами.

    Args:
        weights: Вектор вагових коефіцієнтів
        alternatives: Список назв елементів

    Returns:
        Відсортований список елементів з вагами та рангами

    Examples:
        >>> ranking = rank_weights(np.array([0.2, 0.5, 0.3]), ["A1", "A2", "A3"])
        >>> ranking[0]['rank'], ranking[0]['alternative']
        (1, 'A2')
    """
    items = [
        {'alternative': alt, 'weight': float(w)}
        for alt, w in zip(alternatives, weights)
    ]

    # Стабільне сортування: при рівних вагах зберігається порядок множини
    items.sort(key=lambda x: x['weight'], reverse=True)

    for rank, item in enumerate(items, start=1):
        item['rank'] = rank

    return items
