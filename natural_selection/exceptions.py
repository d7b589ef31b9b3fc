"""Natural selection exception hierarchy.

Centralised base classes so callers (the backend, the CLI, tests) can catch
domain failures narrowly instead of relying on bare ``except Exception``.
"""


class NaturalSelectionError(Exception):
    """Root of all natural-selection domain exceptions."""


class SimulationError(NaturalSelectionError):
    """Errors during simulation execution (controller, clock, ledger)."""


class GeneticsError(SimulationError):
    """Gene, allele, or genotype failure."""


class InvalidParentsError(GeneticsError):
    """Breeding was requested with parents that cannot mate."""


class AlreadyMutatedError(GeneticsError):
    """A gene's mutant allele was activated (or scheduled) more than once."""


class DominanceUnknownError(GeneticsError):
    """A heterozygous pair was expressed before dominance was assigned.

    Unreachable under correct sequencing: a mutant allele can only enter a
    genotype after activation has assigned dominance.
    """


class InvalidGenotypeError(GeneticsError):
    """A genotype references unknown genes, foreign alleles, or inactive mutants."""


class OutOfOrderError(SimulationError):
    """Population ledger records were written out of generation order."""


class ClockStateError(SimulationError):
    """An illegal generation clock state transition was requested."""


class LifecycleError(SimulationError):
    """A bunny's alive/dead state was changed illegally."""


class ConfigurationError(NaturalSelectionError):
    """Invalid or missing configuration."""


class InvalidConfigurationError(ConfigurationError):
    """A configuration value is outside its valid range."""
