"""Allele identities.

Alleles are immutable values. All six that can ever exist are defined here;
a mutant allele only becomes part of the gene pool once its gene's mutation
is activated (see ``Gene.activate_mutation``).
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Allele:
    """A variant of a gene.

    Attributes:
        name: Human-readable name, e.g. "brown fur"
        code: Short code used in compact encodings, e.g. "B"
    """

    name: str
    code: str

    def __str__(self) -> str:
        return self.name


# Fur
WHITE_FUR = Allele("white fur", "W")
BROWN_FUR = Allele("brown fur", "B")

# Ears
STRAIGHT_EARS = Allele("straight ears", "S")
FLOPPY_EARS = Allele("floppy ears", "F")

# Teeth
SHORT_TEETH = Allele("short teeth", "T")
LONG_TEETH = Allele("long teeth", "L")

ALL_ALLELES = (WHITE_FUR, BROWN_FUR, STRAIGHT_EARS, FLOPPY_EARS, SHORT_TEETH, LONG_TEETH)

_BY_CODE = {allele.code: allele for allele in ALL_ALLELES}


def allele_from_code(code: str) -> Allele:
    """Look up an allele by its short code.

    Raises:
        KeyError: If no allele has this code
    """
    return _BY_CODE[code]
