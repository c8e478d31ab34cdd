"""Pet accompaniment inference from free text.

The Tour API never says "pets allowed: yes/no"; it ships several free-text
fields. Whether a place accepts pets is decided by an ordered rule list:

1. no text at all        -> not allowed
2. any disallow keyword  -> not allowed (wins over any allow keyword)
3. any allow keyword     -> allowed
4. otherwise             -> not allowed

The keyword lists are policy and can be tuned. Generic terms such as "가능"
trade precision for recall.
"""
import re
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from app.constants import PET_SIZE_LARGE, PET_SIZE_MEDIUM, PET_SIZE_SMALL
from app.domain.entities.tour import PetTourInfo

DISALLOW_KEYWORDS: Tuple[str, ...] = (
    "불가", "금지", "입장불가", "동반불가", "출입불가", "안됨", "미허용",
    "not allowed", "prohibited", "no pets",
)

ALLOW_KEYWORDS: Tuple[str, ...] = (
    "가능", "허용", "동반", "ok", "o.k", "yes",
)

# Size classes imply accompaniment is contemplated
SIZE_CLASS_KEYWORDS: Tuple[str, ...] = ("소형", "중형", "대형")

# Named precautions are positive evidence as well
PRECAUTION_KEYWORDS: Tuple[str, ...] = (
    "목줄", "리드줄", "입마개", "이동장", "케이지", "배변봉투",
    "leash", "muzzle", "carrier",
)

# Matched as whole tokens only; as substrings they would hit almost anything
ALLOW_TOKENS: Tuple[str, ...] = ("y",)

PET_SIZE_KEYWORDS = {
    PET_SIZE_SMALL: ("소형", "소형견", "small"),
    PET_SIZE_MEDIUM: ("중형", "중형견", "medium"),
    PET_SIZE_LARGE: ("대형", "대형견", "large"),
}

_TOKEN_SPLIT = re.compile(r"[\s,./·()\[\]:;!?]+")


def _contains_any(keywords: Iterable[str]) -> Callable[[str], bool]:
    def matcher(text: str) -> bool:
        return any(keyword in text for keyword in keywords)
    return matcher


def _has_token(tokens: Iterable[str]) -> Callable[[str], bool]:
    wanted = set(tokens)

    def matcher(text: str) -> bool:
        return any(part in wanted for part in _TOKEN_SPLIT.split(text) if part)
    return matcher


@dataclass(frozen=True)
class PetPolicyRule:
    """One step of the decision list. ``matches`` receives lowercased text."""
    name: str
    verdict: bool
    matches: Callable[[str], bool]


PET_POLICY_RULES: List[PetPolicyRule] = [
    PetPolicyRule("disallow-keyword", False, _contains_any(DISALLOW_KEYWORDS)),
    PetPolicyRule("allow-keyword", True, _contains_any(ALLOW_KEYWORDS)),
    PetPolicyRule("size-class", True, _contains_any(SIZE_CLASS_KEYWORDS)),
    PetPolicyRule("precaution", True, _contains_any(PRECAUTION_KEYWORDS)),
    PetPolicyRule("allow-token", True, _has_token(ALLOW_TOKENS)),
]


def evaluate_pet_text(
    text: Optional[str],
    rules: Sequence[PetPolicyRule] = PET_POLICY_RULES,
) -> Tuple[bool, Optional[str]]:
    """Return (allowed, name of the deciding rule). No rule matched -> (False, None)."""
    if not text or not text.strip():
        return False, None
    lowered = text.lower()
    for rule in rules:
        if rule.matches(lowered):
            return rule.verdict, rule.name
    return False, None


def is_pet_allowed_from_text(text: Optional[str]) -> bool:
    allowed, _ = evaluate_pet_text(text)
    return allowed


def merge_pet_text(pet_info: Optional[PetTourInfo]) -> str:
    """Join every candidate text field of a pet record, skipping empty ones."""
    if pet_info is None:
        return ""
    parts = [
        pet_info.acmpy_type_cd,
        pet_info.etc_acmpy_info,
        pet_info.rela_poses_fclty,
        pet_info.acmpy_need_mtr,
        pet_info.acmpy_psbl_cpam,
        pet_info.chkpetleash,
        pet_info.chkpetsize,
        pet_info.chkpetplace,
        pet_info.chkpetfee,
        pet_info.petinfo,
    ]
    return " ".join(part for part in parts if part)


def is_pet_allowed(pet_info: Optional[PetTourInfo]) -> bool:
    return is_pet_allowed_from_text(merge_pet_text(pet_info))


def matches_pet_size(text: Optional[str], pet_sizes: Sequence[str]) -> bool:
    """True when the size text mentions any requested size; no request accepts anything."""
    if len(pet_sizes) == 0:
        return True
    if not text:
        return False
    normalized = text.lower()
    return any(
        keyword in normalized
        for size in pet_sizes
        for keyword in PET_SIZE_KEYWORDS.get(size, ())
    )


def is_pet_size_match(pet_info: Optional[PetTourInfo], pet_sizes: Sequence[str]) -> bool:
    if len(pet_sizes) == 0:
        return True
    return matches_pet_size(pet_info.size_text if pet_info else None, pet_sizes)


def filter_tours_by_pet(
    items: Sequence,
    pet_allowed: bool,
    pet_sizes: Sequence[str],
    get_pet_info: Callable[[object], Optional[PetTourInfo]] = lambda item: getattr(item, "pet_info", None),
) -> list:
    """Keep items passing both the accompaniment and size predicates.

    Order is preserved and the input is not modified, so applying the filter
    twice gives the same result as applying it once.
    """
    if not pet_allowed and len(pet_sizes) == 0:
        return list(items)

    result = []
    for item in items:
        pet_info = get_pet_info(item)
        allowed = not pet_allowed or is_pet_allowed(pet_info)
        size_ok = is_pet_size_match(pet_info, pet_sizes)
        if allowed and size_ok:
            result.append(item)
    return result
