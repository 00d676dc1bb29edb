"""Lender recommendation DTOs."""

from __future__ import annotations
from pydantic import BaseModel

from dealroom.domain.entities.lender_recommendation import LenderRecommendation


class LenderRecommendationDTO(BaseModel):
    id: str
    lender_name: str
    approval_probability: int
    estimated_rate: float
    estimated_terms: str
    time_to_close: int
    advantages: list[str]
    requirements: list[str]
    competitive_edge: str

    @classmethod
    def from_entity(cls, recommendation: LenderRecommendation) -> LenderRecommendationDTO:
        return cls(
            id=recommendation.id,
            lender_name=recommendation.lender_name,
            approval_probability=recommendation.approval_probability,
            estimated_rate=recommendation.estimated_rate,
            estimated_terms=recommendation.estimated_terms,
            time_to_close=recommendation.time_to_close,
            advantages=list(recommendation.advantages),
            requirements=list(recommendation.requirements),
            competitive_edge=recommendation.competitive_edge,
        )
