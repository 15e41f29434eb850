#!/usr/bin/env python3
"""
Тестування вектора пріоритетів (степеневий метод) та узгодженості
"""

import sys
import os

import numpy as np
import pytest

# Додаємо поточну директорію до шляху
sys.path.insert(0, os.path.dirname(__file__))

from consistency import (
    consistency_spectral,
    extract_priority,
    power_iteration,
    rank_weights,
)

SAATY_EXAMPLE = np.array([
    [1, 3, 5, 7],
    [1/3, 1, 3, 5],
    [1/5, 1/3, 1, 3],
    [1/7, 1/5, 1/3, 1],
])


def _random_reciprocal(n, rng):
    matrix = np.ones((n, n))
    for i in range(n):
        for j in range(i + 1, n):
            value = rng.uniform(1.0, 9.0)
            if rng.random() < 0.5:
                value = 1.0 / value
            matrix[i, j] = value
            matrix[j, i] = 1.0 / value
    return matrix


def test_two_item_example():
    s_max = 9.0
    weights = extract_priority(np.array([[1.0, s_max], [1.0 / s_max, 1.0]]))
    assert np.allclose(weights, [s_max / (1 + s_max), 1 / (1 + s_max)])
    assert weights[0] > weights[1]


def test_neutral_matrix_is_uniform():
    weights = extract_priority(np.ones((3, 3)))
    assert np.allclose(weights, [1 / 3, 1 / 3, 1 / 3])


def test_degenerate_sizes():
    assert extract_priority(np.zeros((0, 0))).tolist() == []
    assert extract_priority(np.array([[1.0]])).tolist() == [1.0]


def test_zero_row_is_absorbed():
    matrix = np.array([
        [1.0, 3.0, 2.0],
        [0.0, 0.0, 0.0],
        [0.5, 1 / 3, 1.0],
    ])
    weights = extract_priority(matrix)
    assert np.all(np.isfinite(weights))
    assert np.all(weights >= 0)
    assert np.isclose(weights.sum(), 1.0)


def test_all_zero_matrix():
    weights = extract_priority(np.zeros((4, 4)))
    assert np.allclose(weights, 0.25)


def test_priority_sums_to_one():
    rng = np.random.default_rng(42)
    for n in range(2, 9):
        weights = extract_priority(_random_reciprocal(n, rng))
        assert len(weights) == n
        assert np.all(weights >= 0)
        assert abs(weights.sum() - 1.0) < 1e-6


def test_deterministic():
    first = extract_priority(SAATY_EXAMPLE, tolerance=1e-10, max_iterations=500)
    second = extract_priority(SAATY_EXAMPLE, tolerance=1e-10, max_iterations=500)
    assert np.array_equal(first, second)


def test_matches_principal_eigenvector():
    weights = extract_priority(SAATY_EXAMPLE, tolerance=1e-12)
    eigenvalues, eigenvectors = np.linalg.eig(SAATY_EXAMPLE)
    principal = np.real(eigenvectors[:, np.argmax(np.real(eigenvalues))])
    principal = principal / principal.sum()
    assert np.allclose(weights, principal, atol=1e-8)


def test_monotonicity():
    """Сильніша перевага A над B дає пріоритет A >= пріоритету B"""
    matrix = np.array([
        [1.0, 2.0, 7.0],
        [0.5, 1.0, 3.0],
        [1 / 7, 1 / 3, 1.0],
    ])
    weights = extract_priority(matrix)
    assert weights[0] >= weights[1] >= weights[2]


@pytest.mark.parametrize("seed", range(10))
def test_dominating_row_gets_higher_priority(seed):
    """Якщо рядок A не менший за рядок B поелементно, то w[A] >= w[B]"""
    rng = np.random.default_rng(seed)
    n = int(rng.integers(3, 8))
    matrix = _random_reciprocal(n, rng)

    # A = 0 переважає B = 1 та не слабший за B щодо решти елементів
    strength = rng.uniform(1.0, 9.0)
    matrix[0, 1] = strength
    matrix[1, 0] = 1.0 / strength
    for j in range(2, n):
        matrix[0, j] = matrix[1, j] * rng.uniform(1.0, 3.0)
        matrix[j, 0] = 1.0 / matrix[0, j]

    weights = extract_priority(matrix, tolerance=1e-12, max_iterations=1000)
    assert weights[0] >= weights[1] - 1e-9


def test_iteration_bound():
    weights, iterations, converged = power_iteration(SAATY_EXAMPLE, tolerance=1e-30, max_iterations=3)
    assert iterations == 3
    assert not converged
    assert np.isclose(weights.sum(), 1.0)

    _, iterations, converged = power_iteration(SAATY_EXAMPLE)
    assert converged
    assert iterations < 1000


def test_rejects_non_square():
    with pytest.raises(ValueError):
        extract_priority(np.ones((2, 3)))


def test_consistency_report():
    report = consistency_spectral(SAATY_EXAMPLE)
    assert report['n'] == 4
    assert report['lambda_max'] >= 4.0
    assert report['is_consistent']

    neutral = consistency_spectral(np.ones((3, 3)))
    assert abs(neutral['CI']) < 1e-6


def test_rank_weights():
    ranking = rank_weights(np.array([0.25, 0.5, 0.25]), ["a", "b", "c"])
    assert [item['alternative'] for item in ranking] == ["b", "a", "c"]
    assert [item['rank'] for item in ranking] == [1, 2, 3]


def main():
    """Головна функція тестування"""
    return pytest.main([__file__, "-v"])


if __name__ == "__main__":
    sys.exit(main())
