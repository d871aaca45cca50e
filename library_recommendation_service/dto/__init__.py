"""Item view-model projection"""

from library_recommendation_service.dto.dto_service import DtoOptions, DtoService, ItemFields

__all__ = ["DtoOptions", "DtoService", "ItemFields"]
