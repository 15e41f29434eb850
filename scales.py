"""
Модуль scales.py - перетворення часу відповіді на інтенсивність переваги
Базується на фундаментальній шкалі Сааті (1-9) методу аналізу ієрархій

Реалізує 2 шкали затримки:
1. Лінійна - інтенсивність спадає лінійно від максимуму до 1
2. Логарифмічна - інтенсивність спадає лінійно за логарифмом затримки

Обидві шкали обмежені й монотонні:
- затримка <= fast_latency  -> максимальна інтенсивність (насичення)
- затримка >= slow_latency  -> 1 ("переваги не виявлено")
- між ними інтенсивність не зростає зі збільшенням затримки

Функції:
- Розрахунок інтенсивності для окремої відповіді
- Довідкова таблиця затримка -> інтенсивність
- Журналювання перетворень (для сирих даних експорту)
"""

import math
from enum import Enum
from typing import Dict, List


class ScaleType(Enum):
    """Типи шкал затримка -> інтенсивність"""
    LINEAR = "linear"  # Лінійне спадання
    LOGARITHMIC = "logarithmic"  # Спадання за log(затримки)


# Межі фундаментальної шкали Сааті
MIN_INTENSITY = 1.0
SAATY_MAX_INTENSITY = 9.0


class LatencyScale:
    """
    Обмежена монотонна шкала: швидша відповідь -> сильніша перевага.

    Args:
        scale_type: Тип шкали
        max_intensity: Інтенсивність насичення (>= 1)
        fast_latency: Затримка (с), до якої інтенсивність максимальна
        slow_latency: Затримка (с), після якої інтенсивність дорівнює 1
        round_to_integer: Округлювати до цілих градацій шкали Сааті

    Examples:
        >>> scale = LatencyScale()
        >>> scale.intensity(0.0)
        9.0
        >>> scale.intensity(5.5)
        5.0
        >>> scale.intensity(60.0)
        1.0
    """

    def __init__(self, scale_type: ScaleType = ScaleType.LINEAR,
                 max_intensity: float = SAATY_MAX_INTENSITY,
                 fast_latency: float = 1.0,
                 slow_latency: float = 10.0,
                 round_to_integer: bool = False):
        if max_intensity < MIN_INTENSITY:
            raise ValueError(f"Максимальна інтенсивність має бути >= 1, отримано {max_intensity}")
        if fast_latency < 0 or slow_latency <= fast_latency:
            raise ValueError(
                f"Потрібно 0 <= fast_latency < slow_latency, отримано {fast_latency}, {slow_latency}"
            )
        if scale_type == ScaleType.LOGARITHMIC and fast_latency <= 0:
            raise ValueError("Логарифмічна шкала потребує fast_latency > 0")

        self.scale_type = scale_type
        self.max_intensity = float(max_intensity)
        self.fast_latency = float(fast_latency)
        self.slow_latency = float(slow_latency)
        self.round_to_integer = round_to_integer

    def position(self, latency: float) -> float:
        """
        Положення затримки на шкалі: 0 - найшвидше, 1 - найповільніше.

        Examples:
            >>> LatencyScale(ScaleType.LOGARITHMIC, fast_latency=1.0, slow_latency=100.0).position(10.0)
            0.5
        """
        if latency < 0:
            raise ValueError(f"Затримка не може бути від'ємною: {latency}")

        if latency <= self.fast_latency:
            return 0.0
        if latency >= self.slow_latency:
            return 1.0

        if self.scale_type == ScaleType.LINEAR:
            t = (latency - self.fast_latency) / (self.slow_latency - self.fast_latency)
        elif self.scale_type == ScaleType.LOGARITHMIC:
            t = (math.log(latency) - math.log(self.fast_latency)) / \
                (math.log(self.slow_latency) - math.log(self.fast_latency))
        else:
            raise ValueError(f"Невідомий тип шкали: {self.scale_type}")

        return max(0.0, min(1.0, t))

    def intensity(self, latency: float) -> float:
        """
        Інтенсивність переваги s у межах [1, max_intensity]

        Args:
            latency: Час відповіді (с)

        Returns:
            Інтенсивність переваги
        """
        t = self.position(latency)
        value = self.max_intensity - t * (self.max_intensity - MIN_INTENSITY)

        if self.round_to_integer:
            value = float(round(value))

        return max(MIN_INTENSITY, min(self.max_intensity, value))

    def get_scale_values(self, n_points: int = 5) -> List[Dict[str, float]]:
        """
        Таблиця відповідності затримка -> інтенсивність для довідки.

        Examples:
            >>> [row['intensity'] for row in LatencyScale().get_scale_values(3)]
            [9.0, 5.0, 1.0]
        """
        if n_points < 2:
            raise ValueError("Кількість точок має бути >= 2")

        table = []
        for i in range(n_points):
            latency = self.fast_latency + i * (self.slow_latency - self.fast_latency) / (n_points - 1)
            table.append({'latency': latency, 'intensity': self.intensity(latency)})
        return table

    def to_dict(self) -> dict:
        return {
            'scale_type': self.scale_type.value,
            'max_intensity': self.max_intensity,
            'fast_latency': self.fast_latency,
            'slow_latency': self.slow_latency,
            'round_to_integer': self.round_to_integer,
        }


def create_transformation_log(comparison: str, selected: str, latency: float,
                              scale: LatencyScale) -> Dict:
    """
    Створює запис журналу перетворення затримки для експорту.

    Args:
        comparison: Назва порівняння (напр. "A vs B")
        selected: Обраний елемент
        latency: Час відповіді (с)
        scale: Шкала перетворення

    Returns:
        Словник з інформацією про перетворення

    Examples:
        >>> log = create_transformation_log("A vs B", "A", 0.2, LatencyScale())
        >>> log['intensity']
        9.0
    """
    return {
        'comparison': comparison,
        'selected': selected,
        'latency': float(latency),
        'intensity': float(scale.intensity(latency)),
        'scale_type': scale.scale_type.value,
        'scale_bounds': {
            'lower': MIN_INTENSITY,
            'upper': scale.max_intensity,
        },
    }
