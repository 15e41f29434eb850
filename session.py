"""
Модуль session.py - сесія збору попарних переваг
Зберігає стан процесу: розклад пар, курсор, журнал відповідей

Реалізує:
- Запис відповіді (пара, вибір, час відповіді)
- Раунд порівнянь з курсором has_next / next_pair
- Сесію: раунд ключових слів + раунд зображень для кожного ключового слова
- Завантаження ключових слів та збереження етапів сесії у JSON
"""

import json
import os
import re
import sys
import uuid
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

from combinations import Pair, generate_combinations
from errors import MalformedResponse


STAGE_KEYWORDS = "keywords"
STAGE_IMAGES = "images"
STAGE_COMPLETE = "complete"


@dataclass(frozen=True)
class Response:
    """Одна відповідь користувача на пару"""
    pair: Pair
    selected: str
    response_time: float
    context: Optional[str] = None

    @property
    def other(self) -> str:
        return self.pair.other(self.selected)

    def to_dict(self) -> dict:
        """Конвертує відповідь у словник для серіалізації"""
        return {
            'left': self.pair.left,
            'right': self.pair.right,
            'selected': self.selected,
            'response_time': float(self.response_time),
            'context': self.context,
        }

    @staticmethod
    def from_dict(data: dict) -> 'Response':
        return Response(
            pair=Pair(data['left'], data['right']),
            selected=data['selected'],
            response_time=float(data['response_time']),
            context=data.get('context'),
        )


def record_response(pair: Pair, selected: str, start_time: float, end_time: float,
                    context: Optional[str] = None) -> Response:
    """
    Створює відповідь з часом рішення end_time - start_time.

    Args:
        pair: Показана пара
        selected: Обраний елемент (один із пари)
        start_time: Момент показу пари (с)
        end_time: Момент вибору (с)
        context: Мітка контексту (ключове слово для пар зображень)

    Returns:
        Відповідь

    Examples:
        >>> r = record_response(Pair("a", "b"), "b", 10.0, 12.5)
        >>> r.response_time, r.other
        (2.5, 'a')
    """
    if selected not in pair:
        raise MalformedResponse(
            f"Обраний елемент {selected!r} не належить до пари {pair.left!r} / {pair.right!r}"
        )
    if end_time < start_time:
        raise ValueError(f"Час завершення {end_time} раніше за час показу {start_time}")

    return Response(pair, selected, end_time - start_time, context)


class ElicitationRound:
    """
    Один раунд порівнянь над фіксованою множиною елементів.
    Пари показуються строго в порядку генерації, по одній.

    Examples:
        >>> rnd = ElicitationRound(["a", "b", "c"])
        >>> pair = rnd.next_pair()
        >>> _ = rnd.record(pair, "a", 0.0, 1.0)
        >>> rnd.get_progress()
        (1, 3)
    """

    def __init__(self, items: Sequence[str], context: Optional[str] = None):
        self.items: List[str] = list(items)
        self.context = context
        self.pairs: List[Pair] = generate_combinations(self.items)
        self.current_pair_idx: int = 0
        self.pending_pair: Optional[Pair] = None
        self.responses: List[Response] = []

    def has_next(self) -> bool:
        """Чи залишились непоказані пари"""
        return self.current_pair_idx < len(self.pairs)

    def next_pair(self) -> Optional[Pair]:
        """
        Показує наступну пару

        Returns:
            Пара або None якщо пари закінчились
        """
        if self.pending_pair is not None:
            raise RuntimeError("Попередня пара ще не отримала відповіді")
        if not self.has_next():
            return None

        self.pending_pair = self.pairs[self.current_pair_idx]
        self.current_pair_idx += 1
        return self.pending_pair

    def record(self, pair: Pair, selected: str, start_time: float, end_time: float) -> Response:
        """Записує відповідь на показану пару"""
        if self.pending_pair is None or pair != self.pending_pair:
            raise RuntimeError(
                f"Пара {pair.left!r} / {pair.right!r} не очікує відповіді"
            )

        response = record_response(pair, selected, start_time, end_time, self.context)
        self.responses.append(response)
        self.pending_pair = None
        return response

    def is_complete(self) -> bool:
        return len(self.responses) == len(self.pairs)

    def get_progress(self):
        """(відповідей, усього пар)"""
        return (len(self.responses), len(self.pairs))


class ElicitationSession:
    """
    Сесія: раунд ключових слів, потім раунд зображень для кожного ключового слова.
    Один активний показ у кожний момент часу; не потокобезпечна.
    """

    def __init__(self, keywords: Sequence[str], images: Sequence[str],
                 session_id: Optional[str] = None):
        self.session_id = session_id or uuid.uuid4().hex
        self.keywords: List[str] = list(keywords)
        self.images: List[str] = list(images)

        self.keyword_round = ElicitationRound(self.keywords)
        self.image_rounds = [ElicitationRound(self.images, context=keyword)
                             for keyword in self.keywords]
        self.rounds = [self.keyword_round] + self.image_rounds

    @property
    def stage(self) -> str:
        if not self.keyword_round.is_complete():
            return STAGE_KEYWORDS
        if not all(rnd.is_complete() for rnd in self.image_rounds):
            return STAGE_IMAGES
        return STAGE_COMPLETE

    def _pending_round(self) -> Optional[ElicitationRound]:
        for rnd in self.rounds:
            if rnd.pending_pair is not None:
                return rnd
        return None

    @property
    def current_context(self) -> Optional[str]:
        """Контекст пари, що показується або буде показана наступною"""
        rnd = self._pending_round()
        if rnd is None:
            rnd = next((r for r in self.rounds if r.has_next()), None)
        return rnd.context if rnd else None

    def has_next(self) -> bool:
        return any(rnd.has_next() for rnd in self.rounds)

    def next_pair(self) -> Optional[Pair]:
        if self._pending_round() is not None:
            raise RuntimeError("Попередня пара ще не отримала відповіді")
        for rnd in self.rounds:
            if rnd.has_next():
                return rnd.next_pair()
        return None

    def record(self, pair: Pair, selected: str, start_time: float, end_time: float) -> Response:
        rnd = self._pending_round()
        if rnd is None:
            raise RuntimeError("Немає пари, що очікує відповіді")
        return rnd.record(pair, selected, start_time, end_time)

    @property
    def keyword_responses(self) -> List[Response]:
        return list(self.keyword_round.responses)

    @property
    def image_responses(self) -> List[Response]:
        responses = []
        for rnd in self.image_rounds:
            responses.extend(rnd.responses)
        return responses

    def get_progress(self):
        """
        Повертає прогрес виконання

        Returns:
            (completed_pairs, total_pairs)
        """
        completed = sum(len(rnd.responses) for rnd in self.rounds)
        total = sum(len(rnd.pairs) for rnd in self.rounds)
        return (completed, total)

    def is_complete(self) -> bool:
        return self.stage == STAGE_COMPLETE


def load_keywords(keywords_file: str) -> List[str]:
    """
    Завантажує ключові слова, розділені комами.
    Помилка читання дає порожній список (сесія не стартує).

    Args:
        keywords_file: Шлях до текстового файлу

    Returns:
        Список ключових слів без пробілів по краях
    """
    try:
        with open(keywords_file, 'r', encoding='utf-8') as f:
            text = f.read()
    except (OSError, UnicodeDecodeError) as e:
        print(f"Попередження: не вдалося завантажити ключові слова: {e}", file=sys.stderr)
        return []

    keywords = []
    for keyword in text.split(','):
        keyword = keyword.strip()
        if not keyword:
            continue
        if keyword in keywords:
            print(f"Попередження: ключове слово '{keyword}' повторюється, пропущено",
                  file=sys.stderr)
            continue
        keywords.append(keyword)
    return keywords


_SESSION_ID_RE = re.compile(r'^[A-Za-z0-9_-]+$')


class SessionStore:
    """
    Сховище завершених етапів сесій: один JSON файл на сесію.
    Проміжний стан раунду не зберігається.
    """

    def __init__(self, directory: str):
        self.directory = directory

    def _path(self, session_id: str) -> str:
        if not _SESSION_ID_RE.match(session_id or ''):
            raise ValueError(f"Некоректний ідентифікатор сесії: {session_id!r}")
        return os.path.join(self.directory, f"{session_id}.json")

    def _read(self, session_id: str) -> Dict:
        path = self._path(session_id)
        if not os.path.exists(path):
            return {}
        with open(path, 'r', encoding='utf-8') as f:
            return json.load(f)

    def _write(self, session_id: str, data: Dict) -> str:
        path = self._path(session_id)
        os.makedirs(self.directory, exist_ok=True)

        # Записуємо у тимчасовий файл і замінюємо атомарно
        tmp_path = path + '.tmp'
        with open(tmp_path, 'w', encoding='utf-8') as f:
            json.dump(data, f, ensure_ascii=False, indent=2)
        os.replace(tmp_path, path)
        return path

    def save_keyword_stage(self, session_id: str, responses: Sequence[Response]) -> str:
        """
        Зберігає журнал відповідей раунду ключових слів.
        Новий раунд ключових слів починає запис сесії заново: етап зображень
        попереднього запуску з тим самим ідентифікатором відкидається.
        """
        data = {'keyword_responses': [r.to_dict() for r in responses]}
        return self._write(session_id, data)

    def save_image_stage(self, session_id: str, responses: Sequence[Response],
                         keywords: Sequence[str], images: Sequence[str]) -> str:
        """Зберігає журнал відповідей раундів зображень разом з обома множинами"""
        data = self._read(session_id)
        data['image_responses'] = [r.to_dict() for r in responses]
        data['keywords'] = list(keywords)
        data['images'] = list(images)
        return self._write(session_id, data)

    def load_completion_inputs(self, session_id: str) -> Dict:
        """
        Завантажує чотири входи завершального етапу.
        Відсутні записи повертаються порожніми.
        """
        data = self._read(session_id)
        return {
            'keyword_responses': [Response.from_dict(r) for r in data.get('keyword_responses', [])],
            'image_responses': [Response.from_dict(r) for r in data.get('image_responses', [])],
            'keywords': list(data.get('keywords', [])),
            'images': list(data.get('images', [])),
        }

