"""
Модуль aggregate.py - дворівнева агрегація пріоритетів
Ключові слова - критерії, зображення - альтернативи (ієрархія Сааті)

Реалізує:
- Зважену суму пріоритетів зображень за вагами ключових слів
- Завершальний етап сесії: МПП та пріоритети для всіх раундів, підсумкові бали
"""

import numpy as np
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence

from config import EngineConfig
from consistency import extract_priority, consistency_spectral, rank_weights
from errors import MalformedResponse, MissingSessionData
from pcm import PairwiseComparisonMatrix
from session import Response


def aggregate_scores(keyword_priority: Sequence[float],
                     image_priority_by_keyword: Mapping[str, Sequence[float]],
                     keywords: Sequence[str],
                     images: Sequence[str]) -> Dict[str, float]:
    """
    Підсумковий бал зображення k: Σ_kw image_priority_by_keyword[kw][k] * keyword_priority[kw].
    Відсутній пріоритет або вага вважаються нулем.

    Args:
        keyword_priority: Вектор пріоритетів ключових слів
        image_priority_by_keyword: {ключове_слово: вектор пріоритетів зображень}
        keywords: Порядок ключових слів
        images: Порядок зображень

    Returns:
        Словник {зображення: бал} у порядку зображень

    Examples:
        >>> scores = aggregate_scores([0.6, 0.4], {"k1": [0.7, 0.3], "k2": [0.2, 0.8]},
        ...                           ["k1", "k2"], ["i1", "i2"])
        >>> {k: round(v, 6) for k, v in scores.items()}
        {'i1': 0.5, 'i2': 0.5}
    """
    scores = {}

    for k, image in enumerate(images):
        total = 0.0
        for kw_idx, keyword in enumerate(keywords):
            vector = image_priority_by_keyword.get(keyword)
            value = float(vector[k]) if vector is not None and k < len(vector) else 0.0
            weight = float(keyword_priority[kw_idx]) if kw_idx < len(keyword_priority) else 0.0
            total += value * weight
        scores[image] = total

    return scores


@dataclass
class SessionResult:
    """Результати завершеної сесії"""
    keywords: List[str]
    images: List[str]
    keyword_matrix: Optional[np.ndarray]
    keyword_priority: np.ndarray
    image_matrices: Dict[str, np.ndarray]
    image_priorities: Dict[str, np.ndarray]
    scores: Dict[str, float]
    consistency: Dict[str, Dict] = field(default_factory=dict)
    errors: Dict[str, str] = field(default_factory=dict)
    matrix_status: Dict[str, Dict] = field(default_factory=dict)

    @property
    def ranking(self) -> List[Dict]:
        return rank_weights(list(self.scores.values()), list(self.scores.keys()))

    def value_and_weight(self, image: str, keyword: str):
        """(пріоритет зображення за ключовим словом, вага ключового слова)"""
        k = self.images.index(image)
        kw_idx = self.keywords.index(keyword)
        vector = self.image_priorities.get(keyword)
        value = float(vector[k]) if vector is not None else 0.0
        weight = float(self.keyword_priority[kw_idx]) if kw_idx < len(self.keyword_priority) else 0.0
        return value, weight


def check_completion_inputs(keyword_responses, image_responses, keywords, images) -> None:
    """Перевіряє, що всі чотири входи присутні й непорожні"""
    inputs = {
        'keywords': keywords,
        'keyword_responses': keyword_responses,
        'image_responses': image_responses,
        'images': images,
    }
    missing = [name for name, value in inputs.items() if value is None or len(value) == 0]
    if missing:
        raise MissingSessionData(missing)


def complete_session(keyword_responses: Sequence[Response],
                     image_responses: Sequence[Response],
                     keywords: Sequence[str],
                     images: Sequence[str],
                     config: Optional[EngineConfig] = None) -> SessionResult:
    """
    Завершальний етап: МПП і пріоритети ключових слів, МПП і пріоритети зображень
    для кожного ключового слова, підсумкові бали.

    Помилкова відповідь перериває лише побудову відповідної МПП;
    її пріоритети в агрегації вважаються нулями.

    Args:
        keyword_responses: Журнал раунду ключових слів
        image_responses: Журнал раундів зображень (контекст = ключове слово)
        keywords: Порядок ключових слів
        images: Порядок зображень
        config: Налаштування обчислень

    Returns:
        Результати сесії
    """
    check_completion_inputs(keyword_responses, image_responses, keywords, images)

    if config is None:
        config = EngineConfig()
    scale = config.build_scale()
    keywords = list(keywords)
    images = list(images)

    consistency = {}
    errors = {}
    matrix_status = {}

    # 1. Ключові слова (критерії)
    keyword_matrix = None
    keyword_priority = np.zeros(len(keywords))
    try:
        pcm = PairwiseComparisonMatrix.from_responses(keywords, keyword_responses, scale)
        keyword_matrix = pcm.matrix
        matrix_status['keywords'] = pcm.to_dict()
        keyword_priority = extract_priority(keyword_matrix, config.tolerance, config.max_iterations)
        consistency['keywords'] = consistency_spectral(keyword_matrix)
    except MalformedResponse as e:
        errors['keywords'] = str(e)

    # 2. Зображення (альтернативи) для кожного ключового слова
    image_matrices = {}
    image_priorities = {}
    for keyword in keywords:
        keyword_data = [r for r in image_responses if r.context == keyword]
        try:
            pcm = PairwiseComparisonMatrix.from_responses(images, keyword_data, scale)
        except MalformedResponse as e:
            errors[keyword] = str(e)
            continue

        image_matrices[keyword] = pcm.matrix
        matrix_status[keyword] = pcm.to_dict()
        image_priorities[keyword] = extract_priority(pcm.matrix, config.tolerance, config.max_iterations)
        consistency[keyword] = consistency_spectral(pcm.matrix)

    # 3. Зважена сума
    scores = aggregate_scores(keyword_priority, image_priorities, keywords, images)

    return SessionResult(
        keywords=keywords,
        images=images,
        keyword_matrix=keyword_matrix,
        keyword_priority=keyword_priority,
        image_matrices=image_matrices,
        image_priorities=image_priorities,
        scores=scores,
        consistency=consistency,
        errors=errors,
        matrix_status=matrix_status,
    )
