"""Roll per-project score triples up into one creator summary."""

from collections import Counter
from typing import Iterable, Mapping, Optional
import numpy as np

from credrank.engine.models import CreatorScoreSummary, ScoreTriple


def mean_excluding_none(values: Iterable[Optional[float]]) -> Optional[float]:
    """Arithmetic mean of the non-None values; None if there are none."""
    present = [v for v in values if v is not None]
    if not present:
        return None
    return float(np.mean(present))


def modal_trust_band(bands: Iterable[Optional[str]]) -> Optional[str]:
    """Most frequent band, ties going to the band seen first."""
    counts = Counter(band for band in bands if band is not None)
    if not counts:
        return None
    return counts.most_common(1)[0][0]


def aggregate_creator_scores(
    creator_handle: str,
    window: str,
    project_scores: Mapping[str, ScoreTriple]
) -> CreatorScoreSummary:
    """
    Combine one creator's per-project triples.

    Projects with no activity (None heat/signal) don't drag the means down.
    """
    triples = list(project_scores.values())
    return CreatorScoreSummary(
        creator_handle=creator_handle,
        window=window,
        avg_heat=mean_excluding_none(t.heat for t in triples),
        avg_signal=mean_excluding_none(t.signal for t in triples),
        trust_band=modal_trust_band(t.trust_band for t in triples),
        project_scores=dict(project_scores),
    )
