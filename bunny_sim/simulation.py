"""Simulation engine for bunny_sim."""

import logging
from datetime import datetime
from dataclasses import dataclass, field
from typing import Dict, List, Optional
import numpy as np

from .config import load_config, SimulationConfig
from .events import EventBus
from .exceptions import ConfigurationError, SimulationError
from .population_parser import parse_initial_population
from .models.allele import Allele, Gene
from .models.bunny_collection import BunnyCollection
from .models.gene_pool import GenePool
from .models.generation import Generation, GenerationStats
from .models.genotype import BunnyVariety, Genotype
from .models.selection import Environment, SelectionAgent, Wolves, ToughFood, LimitedFood

logger = logging.getLogger(__name__)


@dataclass
class SimulationResults:
    """Results from a completed simulation."""
    seed: int
    status: str  # 'completed', 'extinct' or 'maxed'
    generations_completed: int
    final_population_size: int
    final_dead_count: int
    total_created: int
    history: List[GenerationStats]
    config: dict
    start_time: datetime
    end_time: datetime
    duration_seconds: float
    warnings: List[str] = field(default_factory=list)


class Simulation:
    """Main simulation class that orchestrates the simulation lifecycle."""

    def __init__(self, config: SimulationConfig):
        """
        Initialize simulation from a configuration.

        Subscribe to event_bus before calling initialize() to observe the
        creation of the initial population.

        Args:
            config: Validated configuration
        """
        self.config = config
        self.event_bus = EventBus()
        self.rng: Optional[np.random.Generator] = None
        self.gene_pool: Optional[GenePool] = None
        self.collection: Optional[BunnyCollection] = None
        self.generation: Optional[Generation] = None
        self.environment = Environment(config.environment)
        self.wolves = Wolves(enabled=config.selection.wolves)
        self.tough_food = ToughFood(enabled=config.selection.tough_food)
        self.limited_food = LimitedFood(enabled=config.selection.limited_food)
        self.varieties: List[BunnyVariety] = []
        self.config_warnings: List[str] = []
        self.history: List[GenerationStats] = []

    @classmethod
    def from_config(cls, config_path: str) -> 'Simulation':
        """
        Create a Simulation instance from a configuration file (convenience factory method).

        Args:
            config_path: Path to YAML/JSON configuration file

        Returns:
            Simulation instance, not yet initialized
        """
        return cls(load_config(config_path))

    @property
    def agents(self) -> List[SelectionAgent]:
        """Selection agents, in the order they are applied."""
        return [self.wolves, self.tough_food, self.limited_food]

    @property
    def is_initialized(self) -> bool:
        return self.collection is not None

    def initialize(self) -> None:
        """Initialize simulation state (gene pool, bunnies, generation clock)."""
        try:
            # Initialize RNG with seed
            self.rng = np.random.Generator(np.random.PCG64(self.config.seed))

            self.gene_pool = GenePool()
            self.config_warnings = []
            self.varieties = parse_initial_population(
                self.gene_pool,
                self.config.initial_population.mutations,
                self.config.initial_population.population,
                max_population=self.config.max_population,
                warnings=self.config_warnings
            )

            self.collection = BunnyCollection(
                self.gene_pool,
                self.rng,
                event_bus=self.event_bus,
                max_age=self.config.max_age,
                max_population=self.config.max_population,
                mutation_percentage=self.config.mutation_percentage,
                pedigree_depth=self.config.pedigree_depth
            )

            self._create_initial_population()

        except (ValueError, ConfigurationError) as e:
            raise SimulationError(f"Failed to initialize simulation: {e}") from e

    def _create_initial_population(self) -> None:
        """Create the generation-zero bunnies described by the parsed varieties."""
        self.generation = Generation(0)
        self.history = []
        for variety in self.varieties:
            for _ in range(variety.count):
                self.collection.create_bunny_zero(Genotype.from_variety(variety))
        logger.info(f"Initial population: {self.collection.get_number_of_live_bunnies()} bunnies")

    def _require_initialized(self) -> None:
        if not self.is_initialized:
            raise SimulationError("Simulation has not been initialized")

    def schedule_mutation(self, gene: Gene, mutant_is_dominant: bool) -> Allele:
        """
        Schedule a mutation that the next litter will carry.

        Args:
            gene: Gene to mutate. Each gene can be mutated once per run.
            mutant_is_dominant: True if the mutant allele is dominant

        Returns:
            The gene's dominant allele

        Raises:
            ValueError: If the gene has already been mutated
        """
        self._require_initialized()
        dominant_allele = self.gene_pool.schedule_mutation(gene, mutant_is_dominant)
        logger.info(f"Mutation scheduled: {gene.name}, dominant allele is {dominant_allele.name}")
        return dominant_allele

    def step_generation(self) -> GenerationStats:
        """
        Execute one generation cycle.

        Returns:
            GenerationStats for the new generation
        """
        self._require_initialized()
        stats = self.generation.execute_cycle(
            collection=self.collection,
            agents=self.agents,
            environment=self.environment,
            rng=self.rng
        )
        self.history.append(stats)
        logger.debug(f"Generation {stats.generation}: live={stats.live_count}, dead={stats.dead_count}, "
                     f"births={stats.births}, deaths={stats.total_deaths}, pruned={stats.pruned}")
        return stats

    def run(self) -> SimulationResults:
        """
        Execute complete simulation from initialization through all generations.

        Stops early if every bunny has died or the population has reached its maximum.

        Returns:
            SimulationResults object with summary and per-generation history

        Raises:
            SimulationError: If simulation fails during execution
        """
        start_time = datetime.now()

        try:
            # Initialize if not already done
            if not self.is_initialized:
                self.initialize()

            status = 'completed'
            generations_completed = 0

            for _ in range(self.config.generations):
                self.step_generation()
                generations_completed += 1

                if self.collection.get_number_of_live_bunnies() == 0:
                    status = 'extinct'
                    break
                if self.collection.is_population_maxed():
                    status = 'maxed'
                    break

            end_time = datetime.now()
            duration = (end_time - start_time).total_seconds()
            logger.info(f"Simulation {status} after {generations_completed} generations "
                        f"({self.collection.get_number_of_live_bunnies()} live bunnies)")

            return SimulationResults(
                seed=self.config.seed,
                status=status,
                generations_completed=generations_completed,
                final_population_size=self.collection.get_number_of_live_bunnies(),
                final_dead_count=self.collection.get_number_of_dead_bunnies(),
                total_created=self.collection.total_created,
                history=list(self.history),
                config=self.config.raw_config,
                start_time=start_time,
                end_time=end_time,
                duration_seconds=duration,
                warnings=list(self.config_warnings)
            )

        except SimulationError:
            raise
        except Exception as e:
            raise SimulationError(f"Simulation failed: {e}") from e

    def play_again(self) -> None:
        """
        Discard every bunny and start over with the initial population.
        Environment and selection agent settings are preserved.
        """
        self._require_initialized()

        # Mutations introduced during the run are gone with the bunnies that carried them
        self.gene_pool.reset()
        self.collection.reset()
        self._create_initial_population()

    def reset(self) -> None:
        """Start over, and restore the environment and selection agents to their configured values."""
        self.environment = Environment(self.config.environment)
        for agent in self.agents:
            agent.reset()
        if self.is_initialized:
            self.play_again()

    def get_allele_counts(self) -> Dict[str, int]:
        """Live bunnies expressing each allele, keyed by allele key, plus 'total'."""
        self._require_initialized()
        return self.collection.get_live_bunny_counts().as_dict()
