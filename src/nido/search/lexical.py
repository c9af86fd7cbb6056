"""
Matching léxico tolerante a typos.

Similitud normalizada basada en distancia de edición (Levenshtein):
    (max_len - distancia) / max_len
"""

import re

_WORD_RE = re.compile(r"[a-z0-9]+")


def edit_distance(a: str, b: str) -> int:
    """Distancia de Levenshtein (inserción, borrado, sustitución)."""
    if a == b:
        return 0
    if len(a) < len(b):
        a, b = b, a
    if not b:
        return len(a)

    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        current = [i]
        for j, char_b in enumerate(b, start=1):
            cost = 0 if char_a == char_b else 1
            current.append(
                min(
                    previous[j] + 1,  # borrado
                    current[j - 1] + 1,  # inserción
                    previous[j - 1] + cost,  # sustitución
                )
            )
        previous = current
    return previous[-1]


def similarity(a: str, b: str) -> float:
    """
    Similitud en [0, 1] entre dos strings, sin distinguir mayúsculas.

    Dos strings vacíos son idénticos (1.0); un vacío contra uno no
    vacío da 0.0.
    """
    a = (a or "").lower()
    b = (b or "").lower()
    max_len = max(len(a), len(b))
    if max_len == 0:
        return 1.0
    return (max_len - edit_distance(a, b)) / max_len


def query_words(text: str, min_length: int = 3) -> list[str]:
    """Palabras de la query (en minúscula) más largas que min_length."""
    return [
        word for word in _WORD_RE.findall((text or "").lower())
        if len(word) > min_length
    ]
