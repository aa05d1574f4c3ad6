"""Update generation, packaging and validation."""

from update_creator_core.update.assembler import UpdateAssembler
from update_creator_core.update.generator import UpdateGenerator, distribution_name
from update_creator_core.update.models import GenerateResult, UpdateError, ValidationResult
from update_creator_core.update.validator import UpdateZipValidator

__all__ = [
    "GenerateResult",
    "UpdateAssembler",
    "UpdateError",
    "UpdateGenerator",
    "UpdateZipValidator",
    "ValidationResult",
    "distribution_name",
]
