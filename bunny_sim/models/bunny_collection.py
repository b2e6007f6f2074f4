"""BunnyCollection: the live and dead bunnies, with generation-wide mating, aging and pruning."""

import logging
from typing import Dict, List, Optional, Set, Tuple

import numpy as np

from ..constants import (
    LITTER_SIZE,
    DEFAULT_MAX_AGE,
    DEFAULT_MAX_POPULATION,
    DEFAULT_MUTATION_PERCENTAGE,
    DEFAULT_PEDIGREE_DEPTH,
    BUNNY_REST_RANGE_SHORT,
    BUNNY_REST_RANGE_MEDIUM,
    BUNNY_REST_RANGE_LONG,
    BUNNY_REST_MEDIUM_POPULATION,
    BUNNY_REST_LONG_POPULATION,
)
from ..events import EventBus, BunnyCreated, BunnyDied, AllBunniesDied, PopulationMaxed, MutationApplied
from ..exceptions import InvariantError
from ..utils import round_symmetric, shuffled, is_non_negative_integer, next_in_range
from .allele import Gene, GENES
from .bunny import Bunny, CauseOfDeath
from .bunny_counts import BunnyCounts
from .gene_pool import GenePool
from .genotype import Genotype
from .punnett_square import PunnettSquare

logger = logging.getLogger(__name__)


class BunnyCollection:
    """
    Owns every bunny in the simulation.

    Each bunny is in exactly one of live_bunnies or dead_bunnies until it is pruned.
    recessive_mutants is the subset of live bunnies that received a recessive
    mutation at birth and have not yet been mated eagerly.
    """

    def __init__(
        self,
        gene_pool: GenePool,
        rng: np.random.Generator,
        event_bus: Optional[EventBus] = None,
        max_age: int = DEFAULT_MAX_AGE,
        max_population: int = DEFAULT_MAX_POPULATION,
        mutation_percentage: float = DEFAULT_MUTATION_PERCENTAGE,
        pedigree_depth: int = DEFAULT_PEDIGREE_DEPTH
    ):
        """
        Initialize an empty collection.

        Args:
            gene_pool: Gene pool that provides dominance and scheduled mutations
            rng: NumPy random number generator, shared with the rest of the simulation
            event_bus: Bus that receives BunnyCreated, BunnyDied, AllBunniesDied, PopulationMaxed
            max_age: Bunnies die of old age when they reach this age, in generations
            max_population: Number of live bunnies that takes over the world
            mutation_percentage: Fraction of the bunnies born in a generation that receive a scheduled mutation
            pedigree_depth: Number of generations shown in the pedigree, used to decide when dead bunnies are pruned
        """
        if max_age < 1:
            raise ValueError(f"max_age must be a positive integer, got {max_age}")
        if max_population < 1:
            raise ValueError(f"max_population must be a positive integer, got {max_population}")
        if not (0.0 <= mutation_percentage <= 1.0):
            raise ValueError(f"mutation_percentage must be between 0.0 and 1.0, got {mutation_percentage}")
        if pedigree_depth < 1:
            raise ValueError(f"pedigree_depth must be a positive integer, got {pedigree_depth}")

        self.gene_pool = gene_pool
        self.rng = rng
        self.event_bus = event_bus or EventBus()
        self.max_age = max_age
        self.max_population = max_population
        self.mutation_percentage = mutation_percentage

        # Dead bunnies are kept this many generations, the oldest generation the pedigree can show
        self.max_dead_bunny_generations = max_age * (pedigree_depth - 1)

        # Keyed by bunny id. Dicts keep insertion order and remove in constant time.
        self._live: Dict[int, Bunny] = {}
        self._dead: Dict[int, Bunny] = {}
        self._recessive_mutants: Dict[int, Bunny] = {}

        self.selected_bunny: Optional[Bunny] = None
        self.total_created = 0
        self.total_pruned = 0
        self._next_id = 0

        # One-shot guards, so that level-triggered notifications fire once per transition
        self._all_died_notified = False
        self._population_maxed_notified = False

        self._rest_range = BUNNY_REST_RANGE_SHORT

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def live_bunnies(self) -> List[Bunny]:
        return list(self._live.values())

    @property
    def dead_bunnies(self) -> List[Bunny]:
        return list(self._dead.values())

    @property
    def recessive_mutants(self) -> List[Bunny]:
        return list(self._recessive_mutants.values())

    def get_number_of_live_bunnies(self) -> int:
        return len(self._live)

    def get_number_of_dead_bunnies(self) -> int:
        return len(self._dead)

    def get_number_of_bunnies(self) -> int:
        return len(self._live) + len(self._dead)

    def contains(self, bunny: Bunny) -> bool:
        return bunny.id in self._live or bunny.id in self._dead

    def is_recessive_mutant(self, bunny: Bunny) -> bool:
        return bunny.id in self._recessive_mutants

    def get_live_bunny_counts(self) -> BunnyCounts:
        return BunnyCounts.from_bunnies(self._live.values())

    def get_dead_bunny_counts(self) -> BunnyCounts:
        return BunnyCounts.from_bunnies(self._dead.values())

    def get_all_bunny_counts(self) -> BunnyCounts:
        return BunnyCounts.from_bunnies(list(self._live.values()) + list(self._dead.values()))

    def get_bunny_rest_range(self) -> Tuple[float, float]:
        """Range of rest time between hops, in seconds. Bunnies rest longer when the population is larger."""
        live_count = len(self._live)
        if live_count < BUNNY_REST_MEDIUM_POPULATION:
            return BUNNY_REST_RANGE_SHORT
        if live_count < BUNNY_REST_LONG_POPULATION:
            return BUNNY_REST_RANGE_MEDIUM
        return BUNNY_REST_RANGE_LONG

    def get_selection_candidates(self) -> List[Bunny]:
        """
        Live bunnies that environmental factors may kill, in random order.
        Recessive mutants are excluded until they have mated.
        """
        return [bunny for bunny in shuffled(self.live_bunnies, self.rng)
                if bunny.id not in self._recessive_mutants]

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def reset(self) -> None:
        """Discard every bunny."""
        self._live.clear()
        self._dead.clear()
        self._recessive_mutants.clear()
        self.selected_bunny = None
        self.total_created = 0
        self.total_pruned = 0
        self._next_id = 0
        self._all_died_notified = False
        self._population_maxed_notified = False
        self._rest_range = BUNNY_REST_RANGE_SHORT
        self.assert_valid_counts()

    def create_bunny(
        self,
        genotype: Genotype,
        father: Optional[Bunny] = None,
        mother: Optional[Bunny] = None,
        generation: int = 0
    ) -> Bunny:
        """
        Create a live bunny and add it to the collection.

        Args:
            genotype: The bunny's genotype
            father: Father, None for generation zero
            mother: Mother, None for generation zero
            generation: Generation in which the bunny is born

        Returns:
            The new bunny
        """
        bunny = Bunny(
            bunny_id=self._next_id,
            genotype=genotype,
            gene_pool=self.gene_pool,
            father=father,
            mother=mother,
            generation=generation,
            rest_time=next_in_range(self._rest_range, self.rng)
        )
        self._next_id += 1
        self.total_created += 1
        self._live[bunny.id] = bunny
        self._all_died_notified = False
        self._update_rest_range()

        self.event_bus.emit(BunnyCreated(bunny=bunny))
        return bunny

    def create_bunny_zero(self, genotype: Optional[Genotype] = None) -> Bunny:
        """Create a generation-zero bunny, homozygous normal unless a genotype is given."""
        return self.create_bunny(genotype or Genotype.create_default(), generation=0)

    def kill_bunny(self, bunny: Bunny, cause: CauseOfDeath) -> None:
        """
        Mark a live bunny as dead. Every cause of death is handled the same way.

        Args:
            bunny: A bunny in live_bunnies
            cause: Why it died

        Raises:
            ValueError: If the bunny is not a live bunny in this collection
        """
        if bunny.id not in self._live or self._live[bunny.id] is not bunny:
            raise ValueError(f"{bunny} is not a live bunny in this collection")

        bunny.die(cause)
        del self._live[bunny.id]
        self._dead[bunny.id] = bunny
        self._recessive_mutants.pop(bunny.id, None)
        self._update_rest_range()

        self.event_bus.emit(BunnyDied(bunny=bunny, cause=cause))

        if not self._live and not self._all_died_notified:
            self._all_died_notified = True
            logger.info(f"All of the bunnies have died (dead={len(self._dead)})")
            self.event_bus.emit(AllBunniesDied(dead_count=len(self._dead)))

        if len(self._live) < self.max_population:
            self._population_maxed_notified = False

    def select_bunny(self, bunny: Optional[Bunny]) -> None:
        """
        Select a bunny for inspection (its pedigree is displayed). A selected bunny is never pruned.

        Raises:
            ValueError: If the bunny is not in this collection
        """
        if bunny is not None and not self.contains(bunny):
            raise ValueError(f"{bunny} is not in this collection")
        self.selected_bunny = bunny

    def move_bunnies(self, dt: float) -> int:
        """
        Step the rest timer of every live bunny.

        Args:
            dt: Time step, in seconds

        Returns:
            Number of bunnies that hopped during this step
        """
        rest_range = self._rest_range
        return sum(1 for bunny in self.live_bunnies if bunny.step(dt, rest_range, self.rng))

    def age_bunnies(self) -> int:
        """
        Age every live bunny by one generation. Bunnies that reach max_age die of old age.

        Returns:
            Number of bunnies that died
        """
        died_count = 0

        # live bunnies change as bunnies die, so iterate over a copy
        for bunny in self.live_bunnies:
            bunny.age += 1
            if bunny.age > self.max_age:
                raise InvariantError(f"{bunny} exceeds max_age={self.max_age}")
            if bunny.age == self.max_age:
                self.kill_bunny(bunny, CauseOfDeath.OLD_AGE)
                died_count += 1

        self.assert_valid_counts()
        logger.debug(f"{died_count} bunnies died of old age")
        return died_count

    # ------------------------------------------------------------------
    # Mating
    # ------------------------------------------------------------------

    def mate_bunnies(self, generation: int) -> int:
        """
        Mate all live bunnies by randomly pairing them. Any bunny can mate with any
        other, regardless of age or relationship. With an odd number of bunnies, one
        does not mate. Scheduled mutations are applied to the new litters.

        Args:
            generation: Current generation. Offspring belong to generation + 1.

        Returns:
            Number of bunnies born, including those from eager mating
        """
        if not is_non_negative_integer(generation):
            raise ValueError(f"invalid generation: {generation}")

        # Random pairing
        bunnies = shuffled(self.live_bunnies, self.rng)

        # Mate recessive mutants first, so their mutation appears in the phenotype sooner
        eager_count = 0
        if self._recessive_mutants:
            eager_count = self.mate_eagerly(generation, bunnies)

        number_to_be_born = (len(bunnies) // 2) * LITTER_SIZE

        # Scheduled mutations are consumed by this round, whether or not any bunnies are born
        mutate_genes = [gene for gene in GENES if self.gene_pool.is_mutation_coming(gene)]
        self.gene_pool.reset_mutation_coming()

        mutation_indices = self._select_mutation_indices(mutate_genes, number_to_be_born)
        if mutate_genes and number_to_be_born == 0:
            logger.info(f"No bunnies were born, so mutations were not applied: {[g.name for g in mutate_genes]}")

        born_index = 0
        for i in range(1, len(bunnies), 2):

            # Bunnies are sexless, so the order within the pair is irrelevant
            father = bunnies[i]
            mother = bunnies[i - 1]
            squares = self._punnett_squares(father, mother)

            for j in range(LITTER_SIZE):
                mutated = [gene for gene in GENES if born_index in mutation_indices[gene]]
                genotype = Genotype.from_cells(
                    *(square.get_cell(j) for square in squares),
                    mutate_genes=mutated
                )
                bunny = self.create_bunny(genotype, father=father, mother=mother, generation=generation + 1)
                born_index += 1

                # Track recessive mutants, to be mated eagerly once another bunny has the mutation
                if bunny.is_original_mutant() and self.gene_pool.is_recessive_mutation(bunny.genotype.mutation):
                    logger.debug(f"adding to recessive mutants: {bunny}")
                    self._recessive_mutants[bunny.id] = bunny

        self.assert_valid_counts()
        if born_index != number_to_be_born:
            raise InvariantError(f"expected {number_to_be_born} bunnies to be born, got {born_index}")
        logger.debug(f"{born_index} bunnies were born")

        for gene in mutate_genes:
            if mutation_indices[gene]:
                self.event_bus.emit(MutationApplied(
                    gene=gene,
                    dominant_allele=self.gene_pool.get_dominant_allele(gene),
                    count=len(mutation_indices[gene])
                ))

        self._check_population_maxed()
        return born_index + eager_count

    def mate_eagerly(self, generation: int, bunnies: List[Bunny]) -> int:
        """
        Mate each recessive mutant with a bunny that carries the same mutant allele.
        Each such pair produces a litter plus one additional offspring biased toward
        homozygosity, so that the mutation appears in the phenotype sooner. No new
        mutations are applied. Mutants with no mate stay pending for the next generation.

        Args:
            generation: Current generation. Offspring belong to generation + 1.
            bunnies: Mating candidates. Mated bunnies are removed as a side effect.

        Returns:
            Number of bunnies born
        """
        if not is_non_negative_integer(generation):
            raise ValueError(f"invalid generation: {generation}")

        born_count = 0

        # Iterate over a working copy, so that every pass shrinks it by at least one
        remaining = list(self._recessive_mutants.values())
        while remaining:
            father = remaining.pop(0)
            if father not in bunnies:
                continue

            mother = self._find_mate_for_recessive_mutant(father, bunnies)
            if mother is None:
                continue

            squares = self._punnett_squares(father, mother)
            for j in range(LITTER_SIZE):
                genotype = Genotype.from_cells(*(square.get_cell(j) for square in squares))
                self.create_bunny(genotype, father=father, mother=mother, generation=generation + 1)
                born_count += 1

            # 1 additional offspring, preferably homozygous for the mutation
            mutant_allele = father.genotype.mutation
            cells = [
                square.get_additional_cell(mutant_allele, self.gene_pool.get_dominant_allele(square.gene))
                for square in squares
            ]
            self.create_bunny(Genotype.from_cells(*cells), father=father, mother=mother, generation=generation + 1)
            born_count += 1

            bunnies.remove(father)
            bunnies.remove(mother)

            # The mother may also be a recessive mutant, e.g. a sibling born with the same mutation
            self._recessive_mutants.pop(father.id, None)
            self._recessive_mutants.pop(mother.id, None)
            if mother in remaining:
                remaining.remove(mother)

            logger.debug(f"mated recessive mutant {father} with {mother}")

        self.assert_valid_counts()
        return born_count

    def _find_mate_for_recessive_mutant(self, father: Bunny, bunnies: List[Bunny]) -> Optional[Bunny]:
        """First bunny, other than the father, that carries the father's mutant allele."""
        mutant_allele = father.genotype.mutation
        if mutant_allele is None:
            raise InvariantError(f"recessive mutant {father} has no mutation")
        for bunny in bunnies:
            if bunny is not father and bunny.genotype.has_allele(mutant_allele):
                return bunny
        return None

    def _punnett_squares(self, father: Bunny, mother: Bunny) -> List[PunnettSquare]:
        return [
            PunnettSquare(father.genotype.get_gene_pair(gene), mother.genotype.get_gene_pair(gene), self.rng)
            for gene in GENES
        ]

    def _select_mutation_indices(self, mutate_genes: List[Gene], number_to_be_born: int) -> Dict[Gene, Set[int]]:
        """
        Choose which of the bunnies about to be born receive each mutation.

        Indices are taken from disjoint prefixes of one shuffled range, in fixed
        gene order, so no bunny receives more than one mutation.
        """
        mutation_indices: Dict[Gene, Set[int]] = {gene: set() for gene in GENES}
        if not mutate_genes:
            return mutation_indices

        number_to_mutate = max(1, round_symmetric(self.mutation_percentage * number_to_be_born))
        indices = [int(i) for i in self.rng.permutation(number_to_be_born)]
        for gene in GENES:
            if gene in mutate_genes:
                mutation_indices[gene] = set(indices[:number_to_mutate])
                indices = indices[number_to_mutate:]
        return mutation_indices

    # ------------------------------------------------------------------
    # Pruning
    # ------------------------------------------------------------------

    def prune_dead_bunnies(self, current_generation: int) -> int:
        """
        Permanently remove dead bunnies that the pedigree can no longer show.
        The selected bunny is never pruned.

        Args:
            current_generation: Current generation

        Returns:
            Number of bunnies pruned
        """
        if not is_non_negative_integer(current_generation):
            raise ValueError(f"invalid generation: {current_generation}")

        number_pruned = 0
        for bunny in self.dead_bunnies:
            if (current_generation - bunny.generation > self.max_dead_bunny_generations and
                    bunny is not self.selected_bunny):
                del self._dead[bunny.id]
                self.total_pruned += 1
                number_pruned += 1

        self.assert_valid_counts()
        if number_pruned > 0:
            logger.debug(f"{number_pruned} dead bunnies pruned")
        return number_pruned

    # ------------------------------------------------------------------
    # Bookkeeping
    # ------------------------------------------------------------------

    def _update_rest_range(self) -> None:
        rest_range = self.get_bunny_rest_range()
        if rest_range != self._rest_range:
            self._rest_range = rest_range
            logger.debug(f"using bunny rest range {rest_range} for population={len(self._live)}")

    def _check_population_maxed(self) -> None:
        if len(self._live) >= self.max_population:
            if not self._population_maxed_notified:
                self._population_maxed_notified = True
                logger.info(f"Bunnies have taken over the world (live={len(self._live)}, dead={len(self._dead)})")
                self.event_bus.emit(PopulationMaxed(live_count=len(self._live)))
        else:
            self._population_maxed_notified = False

    def is_population_maxed(self) -> bool:
        return len(self._live) >= self.max_population

    def assert_valid_counts(self) -> None:
        """
        Check that the collections are consistent with the bunnies created and pruned.

        Raises:
            InvariantError: If the counts are out of sync
        """
        live = len(self._live)
        dead = len(self._dead)
        expected = self.total_created - self.total_pruned
        if live + dead != expected:
            raise InvariantError(
                f"bunny counts are out of sync, live={live}, dead={dead}, "
                f"created={self.total_created}, pruned={self.total_pruned}"
            )
        if not all(key in self._live for key in self._recessive_mutants):
            raise InvariantError("recessive mutants must be live bunnies")
