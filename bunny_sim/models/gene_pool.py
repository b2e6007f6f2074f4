"""GenePool model: per-gene dominance and scheduled mutations."""

from dataclasses import dataclass
from typing import Dict, List, Optional

from .allele import Allele, Gene, GENES, gene_for_allele


@dataclass
class GeneState:
    """Mutable state for one gene."""
    dominant_allele: Optional[Allele] = None  # None until a mutation exists
    initial_dominant_allele: Optional[Allele] = None  # restored by reset()
    mutation_coming: bool = False  # the next litter will receive this gene's mutation


class GenePool:
    """
    Owns which allele of each gene is dominant, and which genes have a mutation
    scheduled for the next litter. Phenotype expression reads dominance from here.
    """
    
    def __init__(self):
        self.genes: List[Gene] = list(GENES)
        self._states: Dict[Gene, GeneState] = {gene: GeneState() for gene in self.genes}
    
    def _state(self, gene: Gene) -> GeneState:
        try:
            return self._states[gene]
        except KeyError:
            raise ValueError(f"Gene is not in this gene pool: {gene!r}") from None
    
    def get_dominant_allele(self, gene: Gene) -> Optional[Allele]:
        return self._state(gene).dominant_allele
    
    def set_initial_dominant_allele(self, gene: Gene, allele: Optional[Allele]) -> None:
        """
        Set a gene's dominance as part of the starting configuration.
        Both the current and the reset value are changed.
        """
        if allele is not None and not gene.has_allele(allele):
            raise ValueError(f"{allele!r} does not belong to {gene!r}")
        state = self._state(gene)
        state.dominant_allele = allele
        state.initial_dominant_allele = allele
    
    def clear_initial_dominance(self) -> None:
        """Forget any dominance set by the starting configuration."""
        for gene in self.genes:
            self.set_initial_dominant_allele(gene, None)
    
    def has_mutation(self, gene: Gene) -> bool:
        """Whether a mutation has been introduced for the gene (dominance is established)."""
        return self._state(gene).dominant_allele is not None
    
    def schedule_mutation(self, gene: Gene, mutant_is_dominant: bool) -> Allele:
        """
        Schedule a mutation for the next litter, and set the gene's dominance.
        
        Args:
            gene: Gene to mutate
            mutant_is_dominant: True if the mutant allele is dominant over the normal allele
            
        Returns:
            The allele that is now dominant
            
        Raises:
            ValueError: If the gene already has a mutation or one is already scheduled
        """
        state = self._state(gene)
        if state.dominant_allele is not None or state.mutation_coming:
            raise ValueError(f"{gene.name} has already been mutated")
        state.dominant_allele = gene.mutant_allele if mutant_is_dominant else gene.normal_allele
        state.mutation_coming = True
        return state.dominant_allele
    
    def cancel_mutation(self, gene: Gene) -> None:
        """Cancel a scheduled mutation that has not yet been applied."""
        state = self._state(gene)
        if state.mutation_coming:
            state.mutation_coming = False
            state.dominant_allele = state.initial_dominant_allele
    
    def is_mutation_coming(self, gene: Gene) -> bool:
        return self._state(gene).mutation_coming
    
    def reset_mutation_coming(self) -> None:
        """Clear every scheduled mutation. Called once a mating round has consumed them."""
        for state in self._states.values():
            state.mutation_coming = False
    
    def is_recessive_mutation(self, allele: Optional[Allele]) -> bool:
        """
        Whether an allele is a mutant allele whose gene currently has the normal
        allele dominant. Such a mutation is invisible until homozygous.
        """
        if allele is None:
            return False
        gene = gene_for_allele(allele)
        state = self._state(gene)
        return (allele is gene.mutant_allele and
                state.dominant_allele is not None and
                state.dominant_allele is not allele)
    
    def reset(self) -> None:
        """Restore starting dominance and clear scheduled mutations."""
        for state in self._states.values():
            state.dominant_allele = state.initial_dominant_allele
            state.mutation_coming = False
