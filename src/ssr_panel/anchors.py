"""Anchor statements used as reference points for SSR."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Mapping, Optional

import yaml

from .models import SurveyQuestion

PACKAGED_ANCHOR_PATH = Path(__file__).parent / "data" / "anchors"

LIKERT_5 = "likert_5"
LIKERT_7 = "likert_7"
NPS = "nps"

_EXPECTED_SIZES = {LIKERT_5: 5, LIKERT_7: 7, NPS: 11}


@dataclass(slots=True)
class AnchorSet:
    """Ordered anchor statements for one scale family."""

    id: str
    anchors: Mapping[int, str]

    def sorted_items(self) -> List[tuple[int, str]]:
        """Return anchors sorted by rating."""

        return sorted(self.anchors.items(), key=lambda item: item[0])

    def ratings(self) -> List[int]:
        return [rating for rating, _ in self.sorted_items()]

    def texts(self) -> List[str]:
        return [text for _, text in self.sorted_items()]

    def __len__(self) -> int:
        return len(self.anchors)


@dataclass(slots=True)
class AnchorCatalog:
    """The three fixed anchor sets: Likert-5, Likert-7 and NPS 0-10."""

    likert_5: AnchorSet
    likert_7: AnchorSet
    nps: AnchorSet

    def select(self, question: SurveyQuestion) -> AnchorSet:
        """Pick the anchor set for a question.

        NPS questions always use the 11-point set. Otherwise a scale exactly
        seven points wide uses the 7-point set and anything else, including
        missing bounds, falls back to the 5-point set.
        """

        if question.type == "nps":
            return self.nps
        if question.scale_min is not None and question.scale_max is not None:
            scale_width = question.scale_max - question.scale_min + 1
            if scale_width == 7:
                return self.likert_7
        return self.likert_5


def load_anchor_set(path: Path) -> AnchorSet:
    """Load a single anchor set from a YAML file."""

    with path.open("r", encoding="utf-8") as fp:
        raw = yaml.safe_load(fp)

    set_id = str(raw.get("scale", path.stem))
    anchors: Dict[int, str] = {
        int(k): str(v) for k, v in (raw.get("anchors") or {}).items()
    }
    if not anchors:
        raise ValueError(f"Anchor file {path} contains no anchors")

    expected = _EXPECTED_SIZES.get(set_id)
    if expected is not None and len(anchors) != expected:
        raise ValueError(
            f"Anchor set {set_id} must define {expected} anchors, found {len(anchors)}"
        )

    ratings = sorted(anchors)
    if ratings != list(range(ratings[0], ratings[0] + len(ratings))):
        raise ValueError(f"Anchor set {set_id} ratings must be contiguous")

    return AnchorSet(id=set_id, anchors=anchors)


@lru_cache(maxsize=4)
def load_anchor_catalog(base_path: Optional[str] = None) -> AnchorCatalog:
    """Load the anchor catalog from the packaged YAML files or an override path."""

    base = Path(base_path) if base_path else PACKAGED_ANCHOR_PATH
    return AnchorCatalog(
        likert_5=load_anchor_set(base / f"{LIKERT_5}.yml"),
        likert_7=load_anchor_set(base / f"{LIKERT_7}.yml"),
        nps=load_anchor_set(base / f"{NPS}.yml"),
    )


__all__ = [
    "AnchorCatalog",
    "AnchorSet",
    "LIKERT_5",
    "LIKERT_7",
    "NPS",
    "load_anchor_catalog",
    "load_anchor_set",
]
