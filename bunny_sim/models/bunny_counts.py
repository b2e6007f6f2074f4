"""BunnyCounts: bunny counts broken down by phenotype."""

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterable, Tuple, TYPE_CHECKING

from .allele import Allele, ALLELES

if TYPE_CHECKING:
    from .bunny import Bunny


@dataclass(frozen=True)
class BunnyCounts:
    """Counts of bunnies, in total, per expressed allele, and per phenotype combination."""
    total_count: int = 0
    allele_counts: Dict[Allele, int] = field(default_factory=dict)
    phenotype_counts: Dict[Tuple[Allele, Allele, Allele], int] = field(default_factory=dict)
    
    @classmethod
    def from_bunnies(cls, bunnies: Iterable['Bunny']) -> 'BunnyCounts':
        allele_counts: Counter = Counter({allele: 0 for allele in ALLELES})
        phenotype_counts: Counter = Counter()
        total = 0
        for bunny in bunnies:
            phenotype = bunny.phenotype
            total += 1
            phenotype_counts[phenotype.key] += 1
            for allele in phenotype.key:
                allele_counts[allele] += 1
        return cls(
            total_count=total,
            allele_counts=dict(allele_counts),
            phenotype_counts=dict(phenotype_counts)
        )
    
    def get_count(self, allele: Allele) -> int:
        """Number of bunnies that express an allele."""
        return self.allele_counts.get(allele, 0)
    
    def as_dict(self) -> Dict[str, int]:
        """Counts keyed by allele key, plus 'total'. Used for stats and logging."""
        result = {'total': self.total_count}
        result.update({allele.key: self.get_count(allele) for allele in ALLELES})
        return result
