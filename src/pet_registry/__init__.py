"""Pet and microchip registry with soft deletion and transactional coordination."""

from .microchips.microchips_models import Microchip
from .pets.pets_models import Pet
from .results import OperationResult

__all__ = ["Microchip", "OperationResult", "Pet"]
