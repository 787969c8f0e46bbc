from jobradar.services.discovery.ats_detection import (
    AtsType,
    detect_ats,
    is_ats,
    supported_ats_types,
)
from jobradar.services.discovery.career_page import CareerPageLocator

__all__ = ["AtsType", "detect_ats", "is_ats", "supported_ats_types", "CareerPageLocator"]
