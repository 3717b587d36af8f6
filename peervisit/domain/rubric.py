"""Standards rubric definition and the built-in physiotherapy standards."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

import yaml

from peervisit.exceptions import RubricDefinitionError


@dataclass(frozen=True)
class StandardItem:
    id: str
    label: str
    is_critical: bool = False


@dataclass(frozen=True)
class StandardCategory:
    id: int
    name: str
    items: Tuple[StandardItem, ...]


@dataclass(frozen=True)
class RubricDefinition:
    """Ordered, immutable set of standard categories."""

    categories: Tuple[StandardCategory, ...]

    def __post_init__(self) -> None:
        seen_categories = set()
        seen_items = set()
        for category in self.categories:
            if category.id in seen_categories:
                raise RubricDefinitionError(f"Duplicate category id: {category.id}")
            seen_categories.add(category.id)
            for item in category.items:
                if item.id in seen_items:
                    raise RubricDefinitionError(f"Duplicate item id: {item.id}")
                seen_items.add(item.id)

    def items(self) -> List[StandardItem]:
        """All items, flattened in rubric order."""
        return [item for category in self.categories for item in category.items]

    def critical_items(self) -> List[StandardItem]:
        return [item for item in self.items() if item.is_critical]

    def item_ids(self) -> List[str]:
        return [item.id for item in self.items()]

    def category_ids(self) -> List[int]:
        return [category.id for category in self.categories]

    def max_score(self, critical_weight: int = 3, max_rating: int = 5) -> int:
        """
        Ceiling of the total score, derived from the items and weights.

        Args:
            critical_weight: Multiplier applied to critical item ratings
            max_rating: Highest rating an item can receive

        Returns:
            Maximum attainable total score
        """
        return sum(
            max_rating * (critical_weight if item.is_critical else 1)
            for item in self.items()
        )


CRITICAL_ITEMS = ("1.2", "2.2.1", "2.2.2", "2.5", "8.2", "8.3", "8.5", "8.9")

_STANDARDS = [
    (1, "มาตรฐานที่ 1: การจัดองค์กรและการบริหารงานกายภาพบำบัด",
     ["1.1", "1.2", "1.3", "1.4", "1.5"]),
    (2, "มาตรฐานที่ 2: การบริหารและพัฒนาทรัพยากรบุคคล",
     ["2.1", "2.2", "2.2.1", "2.2.2", "2.2.3", "2.3.1", "2.3.2", "2.3.3", "2.4", "2.5"]),
    (3, "มาตรฐานที่ 3: การบริหารสิ่งแวดล้อมและความปลอดภัย",
     ["3.1.1", "3.1.2", "3.1.3", "3.2", "3.3.1", "3.3.2", "3.4", "3.5.1", "3.5.2"]),
    (4, "มาตรฐานที่ 4: การบริหารความเสี่ยง",
     ["4.1", "4.2", "4.3", "4.4"]),
    (5, "มาตรฐานที่ 5: เครื่องมือทางกายภาพบำบัด อุปกรณ์ และสิ่งอำนวยความสะดวก",
     ["5.1", "5.2", "5.3", "5.4", "5.5"]),
    (6, "มาตรฐานที่ 6: ระบบข้อมูลสารสนเทศทางกายภาพบำบัด",
     ["6.1", "6.2"]),
    (7, "มาตรฐานที่ 7: การบริการทางกายภาพบำบัด",
     ["7.1"]),
    (8, "มาตรฐานที่ 8: กระบวนการทางกายภาพบำบัด",
     ["8.1.1", "8.1.2", "8.2", "8.3", "8.4.1", "8.4.2", "8.4.3", "8.5", "8.6", "8.7", "8.8", "8.9"]),
    (9, "มาตรฐานที่ 9: ผลลัพธ์การดำเนินงานของงานกายภาพบำบัด",
     ["9.1", "9.2", "9.3"]),
]


def build_rubric(
    standards: Iterable[Tuple[int, str, Iterable[str]]],
    critical_ids: Iterable[str] = (),
) -> RubricDefinition:
    """Build a rubric from (category id, name, item ids) triples."""
    critical = set(critical_ids)
    categories = []
    for category_id, name, item_ids in standards:
        items = tuple(
            StandardItem(id=item_id, label=f"ข้อ {item_id}", is_critical=item_id in critical)
            for item_id in item_ids
        )
        categories.append(StandardCategory(id=int(category_id), name=name, items=items))
    return RubricDefinition(categories=tuple(categories))


STANDARDS_RUBRIC = build_rubric(_STANDARDS, CRITICAL_ITEMS)


def load_rubric_yaml(path: str | Path) -> RubricDefinition:
    """
    Load a rubric from a YAML file.

    Expected layout:

        categories:
          - id: 1
            name: Organisation
            items:
              - {id: "1.1", label: "Policy", critical: false}
              - "1.2"

    Bare string items get a default label and are non-critical unless listed
    under a top-level ``critical`` key.
    """
    with open(path, "r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}

    if not isinstance(data, dict) or not isinstance(data.get("categories"), list):
        raise RubricDefinitionError(f"Rubric file {path} has no 'categories' list")

    critical = {str(x) for x in data.get("critical", []) or []}
    categories: List[StandardCategory] = []
    for raw_cat in data["categories"]:
        try:
            category_id = int(raw_cat["id"])
            name = str(raw_cat.get("name", f"Category {category_id}"))
            raw_items = raw_cat.get("items") or []
        except (KeyError, TypeError, ValueError) as e:
            raise RubricDefinitionError(f"Malformed category in {path}: {raw_cat!r}") from e

        items: List[StandardItem] = []
        for raw_item in raw_items:
            if isinstance(raw_item, dict):
                if "id" not in raw_item:
                    raise RubricDefinitionError(f"Rubric item without id in category {category_id}")
                item_id = str(raw_item["id"])
                label = str(raw_item.get("label", f"ข้อ {item_id}"))
                is_critical = bool(raw_item.get("critical", item_id in critical))
            else:
                item_id = str(raw_item)
                label = f"ข้อ {item_id}"
                is_critical = item_id in critical
            items.append(StandardItem(id=item_id, label=label, is_critical=is_critical))
        categories.append(StandardCategory(id=category_id, name=name, items=tuple(items)))

    return RubricDefinition(categories=tuple(categories))


def load_rubric(
    path: str | Path | None = None,
    expected_max_score: Optional[int] = None,
    critical_weight: int = 3,
    max_rating: int = 5,
) -> RubricDefinition:
    """
    Load the rubric used at process start.

    Args:
        path: Optional YAML rubric; the built-in standards rubric is used when None
        expected_max_score: If given, the derived ceiling must equal it
        critical_weight: Multiplier for critical items when deriving the ceiling
        max_rating: Highest rating when deriving the ceiling

    Returns:
        RubricDefinition

    Raises:
        RubricDefinitionError: If the rubric is malformed or the ceiling differs
    """
    rubric = load_rubric_yaml(path) if path else STANDARDS_RUBRIC
    if not rubric.items():
        raise RubricDefinitionError("Rubric has no items")

    ceiling = rubric.max_score(critical_weight, max_rating)
    if expected_max_score is not None and ceiling != int(expected_max_score):
        raise RubricDefinitionError(
            f"Rubric ceiling is {ceiling}, expected {expected_max_score}"
        )
    return rubric
