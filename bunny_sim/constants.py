"""Model constants for bunny_sim."""

from typing import Tuple

# Number of offspring produced each time a pair of bunnies mates. Must be 4,
# the number of cells in the Punnett square for one gene.
LITTER_SIZE = 4

# Bunnies die when they reach this age, in generations
DEFAULT_MAX_AGE = 5

# Number of live bunnies required to take over the world
DEFAULT_MAX_POPULATION = 1000

# Fraction of a litter generation that receives a scheduled mutation
DEFAULT_MUTATION_PERCENTAGE = 0.25

# Number of generations shown in the pedigree tree, including the selected bunny
DEFAULT_PEDIGREE_DEPTH = 4

# Initial population used when none is configured, or when the configured one is rejected
DEFAULT_MUTATIONS = ''
DEFAULT_POPULATION = ['2']

# Rest time between hops, in seconds. Bunnies rest longer as the population grows.
BUNNY_REST_RANGE_SHORT: Tuple[float, float] = (2.0, 4.0)
BUNNY_REST_RANGE_MEDIUM: Tuple[float, float] = (3.0, 7.0)
BUNNY_REST_RANGE_LONG: Tuple[float, float] = (5.0, 9.0)
BUNNY_REST_MEDIUM_POPULATION = 10
BUNNY_REST_LONG_POPULATION = 250

# Selection agents: fraction of the targeted bunnies that die each generation
WOLVES_PERCENT_TO_EAT_RANGE: Tuple[float, float] = (0.45, 0.5)
TOUGH_FOOD_PERCENT_TO_STARVE_RANGE: Tuple[float, float] = (0.45, 0.5)
LIMITED_FOOD_PERCENT_TO_STARVE_RANGE: Tuple[float, float] = (0.2, 0.25)

# Bunnies that have the favored trait die at this fraction of the rate of the others
WOLVES_MATCHING_FUR_FACTOR = 0.1
TOUGH_FOOD_LONG_TEETH_FACTOR = 0.1
LIMITED_FOOD_LONG_TEETH_FACTOR = 0.5
