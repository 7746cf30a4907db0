"""
services/permutation.py

Fisher-Yates 셔플과 정답 보존 보기 셔플.
순수 함수. 입력을 변경하지 않고 항상 새 리스트를 반환한다.
"""

import random
from typing import List, NamedTuple, Optional, Sequence, TypeVar

from mcq_exam.models.question_model import AttemptQuestion

T = TypeVar("T")


class _OptionSlot(NamedTuple):
    """보기 텍스트와 정답 여부를 한 단위로 묶는다. 둘은 항상 함께 이동한다."""
    option: str
    is_correct: bool


def shuffle(items: Sequence[T], rng: Optional[random.Random] = None) -> List[T]:
    """
    균일 무작위 순열을 반환한다 (Fisher-Yates / Knuth).

    Args:
        items: 섞을 시퀀스. 변경되지 않는다.
        rng:   난수 생성기 (테스트에서 시드 고정용). 없으면 random 모듈 전역 생성기.

    Returns:
        items의 사본을 섞은 리스트. 원소가 0~1개이면 그대로의 사본.
    """
    randint = (rng or random).randint
    result = list(items)
    for i in range(len(result) - 1, 0, -1):
        j = randint(0, i)
        result[i], result[j] = result[j], result[i]
    return result


def shuffle_options(question: AttemptQuestion, rng: Optional[random.Random] = None) -> AttemptQuestion:
    """
    보기 순서를 섞은 새 AttemptQuestion을 반환한다.

    (보기, 정답 여부) 쌍을 섞은 뒤 정답 표시가 붙은 쌍의 위치를 새 correct_index로 삼는다.
    보기 리스트와 인덱스를 따로 섞으면 정답과 텍스트의 연결이 끊어진다.
    """
    slots = [
        _OptionSlot(option, index == question.correct_index)
        for index, option in enumerate(question.options)
    ]
    shuffled = shuffle(slots, rng)

    correct_index = next(index for index, slot in enumerate(shuffled) if slot.is_correct)
    return AttemptQuestion(
        id=question.id,
        text=question.text,
        options=[slot.option for slot in shuffled],
        correct_index=correct_index,
    )
