from typing import Iterable


def normalize_code(code: str) -> str:
    return code.strip().upper()


class DiscountValidator:
    """Case-insensitive membership check against a fixed allow-set of codes."""

    def __init__(self, codes: Iterable[str]):
        self.codes = frozenset(normalize_code(code) for code in codes)

    def is_valid(self, code: str) -> bool:
        return normalize_code(code) in self.codes

    def __contains__(self, code: str) -> bool:
        return self.is_valid(code)

    def __len__(self) -> int:
        return len(self.codes)
