"""Combine recommendations across matched traits."""

from collections.abc import Iterable

from ..models import GeneticTrait, HealthRecommendation


def aggregate_recommendations(traits: Iterable[GeneticTrait]) -> list[HealthRecommendation]:
    """Flatten trait recommendations into one list ordered by priority.

    Recommendations are deduplicated by service name: a later occurrence
    replaces an earlier one but keeps the position the service was first
    seen at. The priority sort is stable, so ties keep that order.
    """
    by_service: dict[str, HealthRecommendation] = {}
    for trait in traits:
        for recommendation in trait.recommendations:
            by_service[recommendation.service] = recommendation

    return sorted(by_service.values(), key=lambda r: r.priority.rank)
