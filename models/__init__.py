from .major import (
    Major, UniversityDetails, AdmissionRecord, MajorRecommendationFilter,
    tier_badges, resolve_major_field,
    ALL_OPTION, REGIONS, MAJOR_CATEGORIES, SUBJECTS, SCHOOLING_LENGTHS, TUITION_RANGES, UNIVERSITY_TIERS,
)
from .student import StudentInput
from .recommendation import (
    RecommendedMajor, RecommendationOutput, RecommendationResult,
    MajorListResponse, RefineRequest, MajorDetailResponse,
)

__all__ = [
    "Major", "UniversityDetails", "AdmissionRecord", "MajorRecommendationFilter",
    "tier_badges", "resolve_major_field",
    "ALL_OPTION", "REGIONS", "MAJOR_CATEGORIES", "SUBJECTS", "SCHOOLING_LENGTHS", "TUITION_RANGES", "UNIVERSITY_TIERS",
    "StudentInput",
    "RecommendedMajor", "RecommendationOutput", "RecommendationResult",
    "MajorListResponse", "RefineRequest", "MajorDetailResponse",
]
