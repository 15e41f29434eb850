#!/usr/bin/env python3
"""
main.py - Головний модуль збору попарних переваг з урахуванням часу відповіді

Реалізує повний цикл:
1. Завантаження ключових слів
2. Раунд порівнянь ключових слів у терміналі (час відповіді = впевненість)
3. Раунди порівнянь зображень для кожного ключового слова
4. Збереження журналів відповідей у сховище сесій
5. Побудова МПП, розрахунок власних векторів, оцінка узгодженості
6. Агрегація підсумкових балів зображень та збереження результатів

Використання:
    python main.py elicit --keywords data/keywords.txt --store sessions/
    python main.py complete --session-id <id> --store sessions/ --out output_dir/
"""

import argparse
import os
import sys
import time
from typing import Callable, List, Optional

from aggregate import complete_session
from config import EngineConfig, load_config
from errors import MissingSessionData
from scales import ScaleType
from session import ElicitationSession, SessionStore, load_keywords, STAGE_KEYWORDS
from export import save_results

DEFAULT_IMAGES = ['image1.jpg', 'image2.jpg', 'image3.jpg', 'image4.jpg']
IMAGE_EXTENSIONS = ('.jpg', '.jpeg', '.png', '.gif', '.bmp', '.webp')


def list_images(image_dir: str) -> List[str]:
    """Повертає відсортовані імена файлів зображень у директорії"""
    return sorted(
        name for name in os.listdir(image_dir)
        if name.lower().endswith(IMAGE_EXTENSIONS)
    )


def build_config(args) -> EngineConfig:
    """
    Налаштування: JSON файл (якщо заданий), потім прапорці командного рядка
    """
    data = load_config(args.config).to_dict() if args.config else {}

    overrides = {
        'tolerance': args.tolerance,
        'max_iterations': args.max_iterations,
        'scale_type': args.scale,
        'max_intensity': args.max_intensity,
        'fast_latency': args.fast_latency,
        'slow_latency': args.slow_latency,
    }
    data.update({k: v for k, v in overrides.items() if v is not None})
    if args.round_to_integer:
        data['round_to_integer'] = True

    return EngineConfig.from_dict(data)


def ask_choice(prompt: str, input_func: Callable[[str], str]) -> Optional[int]:
    """
    Читає вибір 1/2; 'q' - вихід із сесії

    Returns:
        0 або 1 (лівий/правий), None якщо користувач вийшов
    """
    while True:
        answer = input_func(prompt).strip().lower()
        if answer in ('1', '2'):
            return int(answer) - 1
        if answer in ('q', 'quit'):
            return None
        print("   Введіть 1, 2 або q")


def run_elicitation(session: ElicitationSession, store: SessionStore,
                    input_func: Callable[[str], str] = input,
                    clock: Callable[[], float] = time.perf_counter) -> bool:
    """
    Проводить сесію в терміналі: показує пари по одній та записує відповіді.

    Args:
        session: Сесія збору переваг
        store: Сховище завершених етапів
        input_func: Джерело відповідей
        clock: Годинник (секунди)

    Returns:
        True якщо сесію завершено, False якщо користувач вийшов
    """
    keyword_stage_saved = False

    while session.has_next():
        pair = session.next_pair()
        completed, total = session.get_progress()
        context = session.current_context

        print()
        if context is None:
            print(f"[{completed + 1}/{total}] Що важливіше?")
        else:
            print(f"[{completed + 1}/{total}] Ключове слово: {context}")
        print(f"   1) {pair.left}")
        print(f"   2) {pair.right}")

        start_time = clock()
        choice = ask_choice("   Ваш вибір: ", input_func)
        end_time = clock()

        if choice is None:
            print("\nСесію перервано, незавершені етапи не збережено")
            return False

        selected = pair.as_tuple()[choice]
        session.record(pair, selected, start_time, end_time)

        if not keyword_stage_saved and session.stage != STAGE_KEYWORDS:
            store.save_keyword_stage(session.session_id, session.keyword_responses)
            keyword_stage_saved = True

    if not keyword_stage_saved:
        store.save_keyword_stage(session.session_id, session.keyword_responses)
    store.save_image_stage(session.session_id, session.image_responses,
                           session.keywords, session.images)
    return True


def elicit(args) -> int:
    """Команда elicit: збір відповідей"""
    print("=" * 80)
    print("ЗБІР ПОПАРНИХ ПЕРЕВАГ")
    print("=" * 80)
    print()

    print("1. Завантаження ключових слів...")
    keywords = load_keywords(args.keywords)
    if not keywords:
        print("Помилка: список ключових слів порожній, сесію не розпочато", file=sys.stderr)
        return 1

    if args.images:
        images = args.images
    elif args.image_dir:
        images = list_images(args.image_dir)
    else:
        images = DEFAULT_IMAGES

    print(f"   Ключові слова: {len(keywords)}")
    print(f"   Зображення: {len(images)}")
    print()

    session = ElicitationSession(keywords, images, args.session_id)
    store = SessionStore(args.store)
    print(f"2. Сесія {session.session_id}: {session.get_progress()[1]} порівнянь")

    if not run_elicitation(session, store):
        return 0

    print()
    print("=" * 80)
    print(f"СЕСІЮ ЗАВЕРШЕНО: {session.session_id}")
    print("=" * 80)
    return 0


def complete(args) -> int:
    """Команда complete: обчислення результатів"""
    print("=" * 80)
    print("РОЗРАХУНОК ПРІОРИТЕТІВ")
    print("=" * 80)
    print()

    config = build_config(args)
    store = SessionStore(args.store)

    # 1. Завантаження даних
    print("1. Завантаження даних сесії...")
    inputs = store.load_completion_inputs(args.session_id)

    # 2. Обчислення
    print("2. Побудова МПП та розрахунок власних векторів...")
    try:
        result = complete_session(config=config, **inputs)
    except MissingSessionData as e:
        print(f"Попередження: {e}. Агрегацію пропущено", file=sys.stderr)
        return 0

    for name, message in result.errors.items():
        print(f"   Попередження ({name}): {message}", file=sys.stderr)
    print()

    print("3. Пріоритети ключових слів:")
    for keyword, weight in zip(result.keywords, result.keyword_priority):
        print(f"   {keyword}: {weight:.4f}")
    print()

    print("4. Узгодженість:")
    for name, report in result.consistency.items():
        print(f"   {name}: CR = {report['CR']:.4f} "
              f"({'узгоджена' if report['is_consistent'] else 'неузгоджена'})")
    print()

    print("5. Ранжування зображень:")
    for item in result.ranking:
        print(f"   Ранг {item['rank']}: {item['alternative']} (бал: {item['weight']:.4f})")
    print()

    print("6. Збереження результатів...")
    for path in save_results(result, inputs['keyword_responses'], inputs['image_responses'],
                             args.out, config):
        print(f"   {path}")

    print()
    print("=" * 80)
    print("ОБРОБКА ЗАВЕРШЕНА")
    print("=" * 80)
    return 0


def create_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Попарні порівняння ключових слів та зображень з урахуванням часу відповіді'
    )
    subparsers = parser.add_subparsers(dest='command', required=True)

    elicit_parser = subparsers.add_parser('elicit', help='Провести сесію порівнянь у терміналі')
    elicit_parser.add_argument('--keywords', type=str, default='data/keywords.txt',
                               help='Файл ключових слів, розділених комами')
    elicit_parser.add_argument('--images', nargs='+', help='Імена файлів зображень')
    elicit_parser.add_argument('--image-dir', type=str, help='Директорія зображень')
    elicit_parser.add_argument('--store', type=str, default='sessions',
                               help='Директорія сховища сесій (за замовчуванням: sessions/)')
    elicit_parser.add_argument('--session-id', type=str, help='Ідентифікатор сесії')
    elicit_parser.set_defaults(func=elicit)

    complete_parser = subparsers.add_parser('complete', help='Обчислити пріоритети та бали')
    complete_parser.add_argument('--session-id', type=str, required=True)
    complete_parser.add_argument('--store', type=str, default='sessions')
    complete_parser.add_argument('--out', type=str, default='out',
                                 help='Директорія для збереження результатів (за замовчуванням: out/)')
    complete_parser.add_argument('--config', type=str, help='JSON файл налаштувань')
    complete_parser.add_argument('--tolerance', type=float)
    complete_parser.add_argument('--max-iterations', type=int)
    complete_parser.add_argument('--scale', choices=[s.value for s in ScaleType])
    complete_parser.add_argument('--max-intensity', type=float)
    complete_parser.add_argument('--fast-latency', type=float)
    complete_parser.add_argument('--slow-latency', type=float)
    complete_parser.add_argument('--round-to-integer', action='store_true')
    complete_parser.set_defaults(func=complete)

    return parser


def main(argv=None) -> int:
    """
    Точка входу програми
    """
    args = create_parser().parse_args(argv)

    try:
        return args.func(args)
    except Exception as e:
        print(f"\nПомилка під час обробки: {e}", file=sys.stderr)
        import traceback
        traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
