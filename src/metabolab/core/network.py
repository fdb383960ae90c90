"""Network definition bundle used for atomic bulk loading."""

from __future__ import annotations

from typing import Annotated, Any, Iterator, Union

from pydantic import BaseModel, Discriminator, Field, Tag, model_validator

from metabolab.core.coupling import EnergyCoupling
from metabolab.core.enzyme import Enzyme, ExtendedEnzyme
from metabolab.core.molecule import Molecule
from metabolab.core.reaction import Reaction
from metabolab.core.regulation import Gene


def _enzyme_variant(value: Any) -> str:
    # Definitions without a variant are basic enzymes
    if isinstance(value, dict):
        return value.get("variant", "basic")
    return getattr(value, "variant", "basic")


AnyEnzyme = Annotated[
    Union[Annotated[Enzyme, Tag("basic")], Annotated[ExtendedEnzyme, Tag("extended")]],
    Discriminator(_enzyme_variant),
]


class Network(BaseModel):
    """Molecules, enzymes (with their reactions), genes and couplings.

    Populated by external collaborators (file loaders, editors) and handed
    to :meth:`metabolab.core.simulation.Simulation.load`.
    """

    name: str = "unnamed"
    molecules: list[Molecule] = Field(default_factory=list)
    enzymes: list[AnyEnzyme] = Field(default_factory=list)
    genes: list[Gene] = Field(default_factory=list)
    couplings: list[EnergyCoupling] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _check_unique_reactions(self) -> Network:
        owners: dict[str, str] = {}
        for enzyme in self.enzymes:
            for reaction in enzyme.reactions:
                if reaction.id in owners:
                    raise ValueError(
                        f"Reaction id {reaction.id} used by both {owners[reaction.id]} and {enzyme.id}"
                    )
                owners[reaction.id] = enzyme.id
        return self

    def iter_reactions(self) -> Iterator[Reaction]:
        for enzyme in self.enzymes:
            yield from enzyme.reactions

    def summary(self) -> dict[str, Any]:
        """Return counts of every component."""
        reactions = list(self.iter_reactions())
        return {
            "name": self.name,
            "num_molecules": len(self.molecules),
            "num_enzymes": len(self.enzymes),
            "num_extended_enzymes": sum(1 for e in self.enzymes if e.variant == "extended"),
            "num_reactions": len(reactions),
            "num_sources": sum(1 for r in reactions if r.is_source),
            "num_sinks": sum(1 for r in reactions if r.is_sink),
            "num_genes": len(self.genes),
            "num_couplings": len(self.couplings),
        }
