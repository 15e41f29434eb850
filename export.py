"""
Модуль export.py - таблиці результатів для табличного експорту

Формує:
- МПП з підписами рядків/стовпців та стовпцем власного вектора
- Таблицю підсумкових балів (значення + вага для кожного ключового слова)
- Сирі журнали відповідей
Та зберігає їх у CSV/JSON
"""

import json
import os
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import numpy as np
import pandas as pd

from aggregate import SessionResult
from config import EngineConfig
from scales import create_transformation_log
from session import Response

EIGENVECTOR_COLUMN = "Eigenvector"


def matrix_table(matrix: np.ndarray, labels: Sequence[str], priority: Sequence[float]) -> pd.DataFrame:
    """
    МПП з підписами та останнім стовпцем вектора пріоритетів

    Examples:
        >>> table = matrix_table(np.array([[1.0, 9.0], [1/9, 1.0]]), ["a", "b"], [0.9, 0.1])
        >>> list(table.columns)
        ['a', 'b', 'Eigenvector']
    """
    labels = list(labels)
    df = pd.DataFrame(np.asarray(matrix, dtype=float), index=labels, columns=labels)
    df[EIGENVECTOR_COLUMN] = list(priority)
    return df


def score_table(result: SessionResult) -> pd.DataFrame:
    """
    Таблиця балів: Image, Value for <kw>, Weight for <kw>, ..., Score
    """
    rows = []
    for image in result.images:
        row = {'Image': image}
        for keyword in result.keywords:
            value, weight = result.value_and_weight(image, keyword)
            row[f"Value for {keyword}"] = value
            row[f"Weight for {keyword}"] = weight
        row['Score'] = result.scores.get(image, 0.0)
        rows.append(row)

    columns = ['Image']
    for keyword in result.keywords:
        columns += [f"Value for {keyword}", f"Weight for {keyword}"]
    columns.append('Score')

    return pd.DataFrame(rows, columns=columns)


def keyword_responses_table(responses: Sequence[Response]) -> pd.DataFrame:
    """Сирий журнал раунду ключових слів"""
    rows = [{
        'Response Time(s)': f"{r.response_time:.4f}",
        'Keyword1': r.pair.left,
        'Keyword2': r.pair.right,
        'Selected Keyword': r.selected,
    } for r in responses]
    return pd.DataFrame(rows, columns=['Response Time(s)', 'Keyword1', 'Keyword2', 'Selected Keyword'])


def image_responses_table(responses: Sequence[Response]) -> pd.DataFrame:
    """Сирий журнал раундів зображень"""
    rows = [{
        'Response Time(s)': f"{r.response_time:.4f}",
        'Left Image': r.pair.left,
        'Right Image': r.pair.right,
        'Selected Image': r.selected,
        'Keyword': r.context or "N/A",
    } for r in responses]
    return pd.DataFrame(
        rows, columns=['Response Time(s)', 'Left Image', 'Right Image', 'Selected Image', 'Keyword']
    )


def _safe_name(label: str) -> str:
    return "".join(ch if ch.isalnum() or ch in "-_" else "_" for ch in label)


def save_results(result: SessionResult,
                 keyword_responses: Sequence[Response],
                 image_responses: Sequence[Response],
                 output_dir: str,
                 config: Optional[EngineConfig] = None) -> List[str]:
    """
    Зберігає таблиці у CSV, а звіт узгодженості, журнал перетворень
    та довідкову таблицю шкали у JSON

    Args:
        result: Результати сесії
        keyword_responses: Журнал раунду ключових слів
        image_responses: Журнал раундів зображень
        output_dir: Директорія для збереження
        config: Налаштування (для журналу перетворень)

    Returns:
        Список створених файлів
    """
    if config is None:
        config = EngineConfig()
    Path(output_dir).mkdir(parents=True, exist_ok=True)
    written = []

    def save_csv(df: pd.DataFrame, filename: str, index: bool = False):
        path = os.path.join(output_dir, filename)
        df.to_csv(path, index=index, encoding='utf-8')
        written.append(path)

    if result.keyword_matrix is not None:
        save_csv(matrix_table(result.keyword_matrix, result.keywords, result.keyword_priority),
                 'keyword_matrix.csv', index=True)

    # Номер ключового слова робить імена файлів унікальними
    for idx, keyword in enumerate(result.keywords, start=1):
        if keyword not in result.image_matrices:
            continue
        table = matrix_table(result.image_matrices[keyword], result.images,
                             result.image_priorities[keyword])
        save_csv(table, f'image_matrix_{idx}_{_safe_name(keyword)}.csv', index=True)

    save_csv(score_table(result), 'image_scores.csv')
    save_csv(keyword_responses_table(keyword_responses), 'raw_keyword_responses.csv')
    save_csv(image_responses_table(image_responses), 'raw_image_responses.csv')

    report = {
        'consistency_analysis': result.consistency,
        'errors': result.errors,
        'matrix_status': result.matrix_status,
        'ranking': result.ranking,
        'config': config.to_dict(),
    }
    report_file = os.path.join(output_dir, 'consistency.json')
    with open(report_file, 'w', encoding='utf-8') as f:
        json.dump(report, f, ensure_ascii=False, indent=2)
    written.append(report_file)

    scale = config.build_scale()
    log_entries: List[Dict] = []
    for r in list(keyword_responses) + list(image_responses):
        entry = create_transformation_log(f"{r.pair.left} vs {r.pair.right}",
                                          r.selected, r.response_time, scale)
        entry['context'] = r.context
        log_entries.append(entry)

    log_file = os.path.join(output_dir, 'scale_transformations.json')
    with open(log_file, 'w', encoding='utf-8') as f:
        json.dump(log_entries, f, ensure_ascii=False, indent=2)
    written.append(log_file)

    reference = {
        'scale': scale.to_dict(),
        'table': scale.get_scale_values(),
    }
    reference_file = os.path.join(output_dir, 'scale_reference.json')
    with open(reference_file, 'w', encoding='utf-8') as f:
        json.dump(reference, f, ensure_ascii=False, indent=2)
    written.append(reference_file)

    return written
