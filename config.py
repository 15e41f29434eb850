"""
Модуль config.py - налаштування рушія (ітерації, шкала затримки)
"""

import json
from dataclasses import dataclass, asdict, fields

from scales import ScaleType, LatencyScale, SAATY_MAX_INTENSITY


@dataclass
class EngineConfig:
    """Параметри обчислень для однієї сесії"""
    tolerance: float = 1e-8
    max_iterations: int = 1000
    scale_type: str = ScaleType.LINEAR.value
    max_intensity: float = SAATY_MAX_INTENSITY
    fast_latency: float = 1.0
    slow_latency: float = 10.0
    round_to_integer: bool = False

    def __post_init__(self):
        if self.tolerance <= 0:
            raise ValueError(f"Допуск має бути додатним, отримано {self.tolerance}")
        if self.max_iterations < 1:
            raise ValueError(f"Кількість ітерацій має бути >= 1, отримано {self.max_iterations}")
        # Перевіряємо параметри шкали одразу
        self.build_scale()

    def build_scale(self) -> LatencyScale:
        """
        Будує шкалу затримка -> інтенсивність

        Examples:
            >>> EngineConfig().build_scale().intensity(0.0)
            9.0
        """
        return LatencyScale(
            scale_type=ScaleType(self.scale_type),
            max_intensity=self.max_intensity,
            fast_latency=self.fast_latency,
            slow_latency=self.slow_latency,
            round_to_integer=self.round_to_integer,
        )

    def to_dict(self) -> dict:
        return asdict(self)

    @staticmethod
    def from_dict(data: dict) -> 'EngineConfig':
        """
        Створює налаштування зі словника (невідомі ключі ігноруються)

        Examples:
            >>> EngineConfig.from_dict({'max_iterations': 50, 'extra': 1}).max_iterations
            50
        """
        known = {f.name for f in fields(EngineConfig)}
        return EngineConfig(**{k: v for k, v in data.items() if k in known})


def load_config(config_file: str) -> EngineConfig:
    """Завантажує налаштування з JSON файлу"""
    with open(config_file, 'r', encoding='utf-8') as f:
        data = json.load(f)
    return EngineConfig.from_dict(data)
