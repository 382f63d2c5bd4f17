"""라인 단위 diff 엔진.

두 텍스트 스냅샷을 최소 편집 거리(Myers 알고리즘)로 정렬하여
REMOVED / COMMON / ADDED 태그가 붙은 라인 시퀀스로 변환합니다.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum


class DiffTag(IntEnum):
    """diff 라인 분류. 값은 wire payload의 direction 필드."""

    REMOVED = -1
    COMMON = 0
    ADDED = 1


@dataclass(frozen=True)
class DiffLine:
    """태그가 붙은 diff 라인.

    Attributes:
        tag: 분류 (REMOVED는 이전 라인, ADDED는 새 라인, COMMON은 양쪽 동일)
        text: 라인 텍스트 (개행 문자 제외)
    """

    tag: DiffTag
    text: str


def split_lines(text: str) -> list[str]:
    """텍스트를 '\\n' 기준으로 분리.

    마지막 개행은 빈 라인을 만들지 않으며, '\\r' 등 다른 문자는 보존합니다.
    """
    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return lines


def diff_lines(old_text: str, new_text: str) -> list[DiffLine]:
    """두 텍스트의 라인 단위 diff 계산.

    Args:
        old_text: 이전 내용
        new_text: 새 내용

    Returns:
        읽기 순서대로 정렬된 DiffLine 리스트.
        REMOVED+COMMON을 이어 붙이면 old_text의 라인,
        ADDED+COMMON을 이어 붙이면 new_text의 라인이 복원됩니다.
    """
    return diff_sequences(split_lines(old_text), split_lines(new_text))


def diff_sequences(old: list[str], new: list[str]) -> list[DiffLine]:
    """라인 시퀀스 diff.

    공통 접두/접미를 제거하고, 한쪽에만 존재하는 라인을 제외한 뒤
    남은 라인을 Myers O(ND) 이분 탐색(선형 메모리)으로 정렬합니다.
    한쪽에만 있는 라인은 공통 라인이 될 수 없으므로 정렬은 여전히 최소입니다.
    """
    prefix = 0
    limit = min(len(old), len(new))
    while prefix < limit and old[prefix] == new[prefix]:
        prefix += 1

    suffix = 0
    while (
        suffix < limit - prefix
        and old[len(old) - 1 - suffix] == new[len(new) - 1 - suffix]
    ):
        suffix += 1

    result = [DiffLine(DiffTag.COMMON, line) for line in old[:prefix]]
    result.extend(
        _middle_diff(old[prefix : len(old) - suffix], new[prefix : len(new) - suffix])
    )
    result.extend(
        DiffLine(DiffTag.COMMON, line) for line in old[len(old) - suffix :]
    )
    return result


def _middle_diff(old: list[str], new: list[str]) -> list[DiffLine]:
    """공통 접두/접미가 제거된 구간 정렬. 교체 구간에서는 REMOVED가 ADDED보다 먼저 옵니다."""
    if not old:
        return [DiffLine(DiffTag.ADDED, line) for line in new]
    if not new:
        return [DiffLine(DiffTag.REMOVED, line) for line in old]

    # 라인을 정수 코드로 치환하여 비교 비용을 줄임
    codes: dict[str, int] = {}
    old_codes = [codes.setdefault(line, len(codes)) for line in old]
    new_codes = [codes.setdefault(line, len(codes)) for line in new]

    in_new = set(new_codes)
    in_old = set(old_codes)
    old_index = [i for i, code in enumerate(old_codes) if code in in_new]
    new_index = [j for j, code in enumerate(new_codes) if code in in_old]

    ops = _myers(
        [old_codes[i] for i in old_index],
        [new_codes[j] for j in new_index],
    )

    result: list[DiffLine] = []
    i = j = 0
    a = b = 0
    for tag in ops:
        if tag is DiffTag.REMOVED:
            a += 1
        elif tag is DiffTag.ADDED:
            b += 1
        else:
            match_old, match_new = old_index[a], new_index[b]
            result.extend(DiffLine(DiffTag.REMOVED, line) for line in old[i:match_old])
            result.extend(DiffLine(DiffTag.ADDED, line) for line in new[j:match_new])
            result.append(DiffLine(DiffTag.COMMON, old[match_old]))
            i, j = match_old + 1, match_new + 1
            a += 1
            b += 1

    result.extend(DiffLine(DiffTag.REMOVED, line) for line in old[i:])
    result.extend(DiffLine(DiffTag.ADDED, line) for line in new[j:])
    return result


def _myers(a: list[int], b: list[int]) -> list[DiffTag]:
    """최소 편집 스크립트를 태그 시퀀스로 반환.

    COMMON은 양쪽에서 한 라인씩, REMOVED는 a에서, ADDED는 b에서 한 라인을 소비합니다.
    """
    prefix = 0
    limit = min(len(a), len(b))
    while prefix < limit and a[prefix] == b[prefix]:
        prefix += 1

    suffix = 0
    while suffix < limit - prefix and a[-1 - suffix] == b[-1 - suffix]:
        suffix += 1

    a = a[prefix : len(a) - suffix]
    b = b[prefix : len(b) - suffix]

    if not a:
        middle = [DiffTag.ADDED] * len(b)
    elif not b:
        middle = [DiffTag.REMOVED] * len(a)
    else:
        middle = _bisect(a, b)

    return [DiffTag.COMMON] * prefix + middle + [DiffTag.COMMON] * suffix


def _bisect(a: list[int], b: list[int]) -> list[DiffTag]:
    """가운데 스네이크를 찾아 두 하위 문제로 분할.

    전방/후방 탐색의 최원점 배열만 유지하므로 메모리는 O(N+M)입니다.
    """
    n, m = len(a), len(b)
    max_d = (n + m + 1) // 2
    offset = max_d
    size = 2 * max_d
    forward = [-1] * size
    backward = [-1] * size
    forward[offset + 1] = 0
    backward[offset + 1] = 0
    delta = n - m
    # delta가 홀수면 전방 탐색에서, 짝수면 후방 탐색에서 겹침이 먼저 발생
    odd = delta % 2 != 0
    f_start = f_end = b_start = b_end = 0

    for d in range(max_d):
        for k in range(-d + f_start, d + 1 - f_end, 2):
            index = offset + k
            if k == -d or (k != d and forward[index - 1] < forward[index + 1]):
                x = forward[index + 1]
            else:
                x = forward[index - 1] + 1
            y = x - k
            while x < n and y < m and a[x] == b[y]:
                x += 1
                y += 1
            forward[index] = x
            if x > n:
                f_end += 2
            elif y > m:
                f_start += 2
            elif odd:
                other = offset + delta - k
                if 0 <= other < size and backward[other] != -1:
                    if x >= n - backward[other]:
                        return _split(a, b, x, y)

        for k in range(-d + b_start, d + 1 - b_end, 2):
            index = offset + k
            if k == -d or (k != d and backward[index - 1] < backward[index + 1]):
                x = backward[index + 1]
            else:
                x = backward[index - 1] + 1
            y = x - k
            while x < n and y < m and a[-x - 1] == b[-y - 1]:
                x += 1
                y += 1
            backward[index] = x
            if x > n:
                b_end += 2
            elif y > m:
                b_start += 2
            elif not odd:
                other = offset + delta - k
                if 0 <= other < size and forward[other] != -1:
                    fx = forward[other]
                    fy = offset + fx - other
                    if fx >= n - x:
                        return _split(a, b, fx, fy)

    # 공통 라인 없음
    return [DiffTag.REMOVED] * n + [DiffTag.ADDED] * m


def _split(a: list[int], b: list[int], x: int, y: int) -> list[DiffTag]:
    return _myers(a[:x], b[:y]) + _myers(a[x:], b[y:])
