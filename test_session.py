#!/usr/bin/env python3
"""
Тестування розкладу пар, запису відповідей та сесії
"""

import sys
import os

import pytest

# Додаємо поточну директорію до шляху
sys.path.insert(0, os.path.dirname(__file__))

from aggregate import complete_session
from combinations import Pair, generate_combinations, count_combinations
from errors import InvalidUniverse, MalformedResponse, MissingSessionData
from session import (
    ElicitationRound,
    ElicitationSession,
    Response,
    SessionStore,
    load_keywords,
    record_response,
    STAGE_COMPLETE,
    STAGE_IMAGES,
    STAGE_KEYWORDS,
)


def test_generate_combinations_counts():
    """Кількість пар N*(N-1)/2, без повторів і пар із собою"""
    for n in range(0, 8):
        items = [f"item{i}" for i in range(n)]
        pairs = generate_combinations(items)

        assert len(pairs) == n * (n - 1) // 2 == count_combinations(n)
        assert all(p.left != p.right for p in pairs)
        assert len({frozenset(p.as_tuple()) for p in pairs}) == len(pairs)


def test_generate_combinations_order():
    pairs = generate_combinations(["a", "b", "c", "d"])
    assert [p.as_tuple() for p in pairs] == [
        ("a", "b"), ("a", "c"), ("a", "d"), ("b", "c"), ("b", "d"), ("c", "d"),
    ]
    # Детермінованість
    assert generate_combinations(["a", "b", "c", "d"]) == pairs


def test_generate_combinations_duplicates():
    with pytest.raises(InvalidUniverse):
        generate_combinations(["a", "b", "a"])


def test_record_response():
    response = record_response(Pair("a", "b"), "a", 1.0, 3.25, context="k1")
    assert response.response_time == 2.25
    assert response.other == "b"
    assert response.context == "k1"

    with pytest.raises(MalformedResponse):
        record_response(Pair("a", "b"), "c", 1.0, 2.0)
    with pytest.raises(ValueError):
        record_response(Pair("a", "b"), "a", 2.0, 1.0)


def test_response_serialization():
    response = Response(Pair("image1.jpg", "image2.jpg"), "image2.jpg", 1.5, "price")
    assert Response.from_dict(response.to_dict()) == response


def test_round_cursor():
    """Пари показуються по одній, у порядку генерації, без повторів"""
    rnd = ElicitationRound(["a", "b", "c"])
    assert rnd.has_next()

    pair = rnd.next_pair()
    assert pair == Pair("a", "b")

    # Нова пара не показується до відповіді на попередню
    with pytest.raises(RuntimeError):
        rnd.next_pair()

    rnd.record(pair, "b", 0.0, 0.5)

    # Повторна відповідь на ту саму пару неможлива
    with pytest.raises(RuntimeError):
        rnd.record(pair, "a", 0.0, 0.5)

    while rnd.has_next():
        pair = rnd.next_pair()
        rnd.record(pair, pair.left, 0.0, 1.0)

    assert rnd.is_complete()
    assert rnd.get_progress() == (3, 3)
    assert rnd.next_pair() is None


def test_round_malformed_keeps_pair_pending():
    rnd = ElicitationRound(["a", "b"])
    pair = rnd.next_pair()

    with pytest.raises(MalformedResponse):
        rnd.record(pair, "z", 0.0, 1.0)

    rnd.record(pair, "a", 0.0, 1.0)
    assert rnd.is_complete()


def _answer_all(session, chooser=lambda pair: pair.left, latency=1.0):
    clock = 0.0
    while session.has_next():
        pair = session.next_pair()
        session.record(pair, chooser(pair), clock, clock + latency)
        clock += latency


def test_session_stages():
    session = ElicitationSession(["k1", "k2", "k3"], ["i1", "i2"], session_id="s1")
    assert session.stage == STAGE_KEYWORDS
    assert session.get_progress() == (0, 3 + 3 * 1)

    # Раунд ключових слів
    for _ in range(3):
        pair = session.next_pair()
        assert session.current_context is None
        session.record(pair, pair.right, 0.0, 2.0)

    assert session.stage == STAGE_IMAGES
    assert session.current_context == "k1"

    _answer_all(session)

    assert session.stage == STAGE_COMPLETE
    assert session.is_complete()
    assert len(session.keyword_responses) == 3
    assert [r.context for r in session.image_responses] == ["k1", "k2", "k3"]
    assert session.next_pair() is None


def test_session_without_keywords():
    session = ElicitationSession([], ["i1", "i2"])
    assert not session.has_next()
    assert session.is_complete()


def test_load_keywords(tmp_path):
    path = tmp_path / "keywords.txt"
    path.write_text(" price , design,,quality , price\n", encoding="utf-8")

    assert load_keywords(str(path)) == ["price", "design", "quality"]


def test_load_keywords_failure(tmp_path):
    assert load_keywords(str(tmp_path / "missing.txt")) == []


def test_session_store(tmp_path):
    session = ElicitationSession(["k1", "k2"], ["i1", "i2", "i3"], session_id="abc")
    _answer_all(session)

    store = SessionStore(str(tmp_path))

    # До збереження всі входи порожні
    inputs = store.load_completion_inputs("abc")
    assert all(len(v) == 0 for v in inputs.values())

    store.save_keyword_stage("abc", session.keyword_responses)
    inputs = store.load_completion_inputs("abc")
    assert inputs['keyword_responses'] == session.keyword_responses
    assert inputs['images'] == []

    store.save_image_stage("abc", session.image_responses, session.keywords, session.images)
    inputs = store.load_completion_inputs("abc")
    assert inputs['keyword_responses'] == session.keyword_responses
    assert inputs['image_responses'] == session.image_responses
    assert inputs['keywords'] == ["k1", "k2"]
    assert inputs['images'] == ["i1", "i2", "i3"]


def test_new_keyword_stage_drops_previous_run(tmp_path):
    """Перезапуск сесії з тим самим ідентифікатором не змішує дані запусків"""
    store = SessionStore(str(tmp_path))

    first = ElicitationSession(["price", "design"], ["i1", "i2"], session_id="s")
    _answer_all(first)
    store.save_keyword_stage("s", first.keyword_responses)
    store.save_image_stage("s", first.image_responses, first.keywords, first.images)

    # Новий запуск перервано після раунду ключових слів
    second = ElicitationSession(["color", "size"], ["i1", "i2"], session_id="s")
    while second.stage == STAGE_KEYWORDS:
        pair = second.next_pair()
        second.record(pair, pair.left, 0.0, 1.0)
    store.save_keyword_stage("s", second.keyword_responses)

    inputs = store.load_completion_inputs("s")
    assert inputs["keyword_responses"] == second.keyword_responses
    assert inputs["image_responses"] == []
    assert inputs["keywords"] == []

    with pytest.raises(MissingSessionData):
        complete_session(**inputs)


def test_session_store_rejects_bad_id(tmp_path):
    store = SessionStore(str(tmp_path))
    with pytest.raises(ValueError):
        store.load_completion_inputs("../escape")


def main():
    """Головна функція тестування"""
    return pytest.main([__file__, "-v"])


if __name__ == "__main__":
    sys.exit(main())
