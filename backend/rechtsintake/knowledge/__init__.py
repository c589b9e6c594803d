from .legal_areas import LEGAL_AREA_NAMES, LEGAL_AREAS, URGENCY_TIERS

__all__ = ["LEGAL_AREA_NAMES", "LEGAL_AREAS", "URGENCY_TIERS"]
