"""Request models for the simulation API."""

from typing import Dict, List, Optional

from pydantic import BaseModel

from natural_selection.habitat import Habitat


class StepRequest(BaseModel):
    """Advance the clock by ``dt`` simulated seconds."""

    dt: float


class MutationRequest(BaseModel):
    """Schedule a mutation for the next generation boundary."""

    gene: str
    fraction: float


class AddBunnyRequest(BaseModel):
    """Add a mate to the current generation.

    ``genotype`` maps gene names to two allele codes (e.g. ``{"fur": ["B", "W"]}``).
    Genes that are left out are homozygous normal.
    """

    genotype: Optional[Dict[str, List[str]]] = None


class EnvironmentRequest(BaseModel):
    """Change the habitat and environmental factors; omitted fields are unchanged."""

    habitat: Optional[Habitat] = None
    wolves: Optional[bool] = None
    limited_food: Optional[bool] = None
    tough_food: Optional[bool] = None
