"""Parsing of the initial population descriptors.

Two values describe the initial population:

    mutations   allele abbreviations for the genes that start with a mutation, e.g. 'FeT'.
                Upper case makes the mutant allele dominant, lower case recessive.
    population  with no mutations, a single positive integer, e.g. ['2'].
                Otherwise expressions of count and genotype, e.g. ['7FFeeTt', '3ffEETT'].

The two values depend on each other, so an error in either one rejects both and
the defaults are used instead.
"""

import logging
import re
from typing import List, Optional

from .constants import DEFAULT_MUTATIONS, DEFAULT_POPULATION, DEFAULT_MAX_POPULATION
from .exceptions import ConfigurationError
from .models.allele import Gene, FUR, EARS, TEETH
from .models.gene_pair import GenePair
from .models.gene_pool import GenePool
from .models.genotype import BunnyVariety

logger = logging.getLogger(__name__)

_EXPRESSION_PATTERN = re.compile(r'[a-zA-Z]')


def parse_initial_population(
    gene_pool: GenePool,
    mutations: str,
    population: List[str],
    max_population: int = DEFAULT_MAX_POPULATION,
    warnings: Optional[List[str]] = None
) -> List[BunnyVariety]:
    """
    Parse the initial population, falling back to the defaults if it is invalid.

    Sets the gene pool's initial dominance for genes named in mutations.

    Args:
        gene_pool: Gene pool whose dominance is configured
        mutations: Mutations descriptor, e.g. 'FeT'
        population: Population descriptor, e.g. ['7FFeeTt', '3ffEETT']
        max_population: The total count must be less than this
        warnings: If given, a message is appended for a rejected descriptor

    Returns:
        One BunnyVariety per population expression
    """
    try:
        mutation_chars = parse_mutations(gene_pool, mutations)
        return parse_population(gene_pool, mutation_chars, population, max_population)
    except ConfigurationError as e:
        message = f"Invalid initial population ({e}): mutations={mutations!r} population={population!r}"
        logger.warning(message)
        if warnings is not None:
            warnings.append(message)

        # Revert dominance that parse_mutations may have set, then use the defaults
        gene_pool.clear_initial_dominance()
        mutation_chars = parse_mutations(gene_pool, DEFAULT_MUTATIONS)
        return parse_population(gene_pool, mutation_chars, DEFAULT_POPULATION, max_population)


def parse_mutations(gene_pool: GenePool, mutations: str) -> List[str]:
    """
    Parse the mutations descriptor and set the initial dominance of the genes it names.

    Args:
        gene_pool: Gene pool whose dominance is configured
        mutations: Mutations descriptor, e.g. 'FeT'

    Returns:
        List of allele abbreviations

    Raises:
        ConfigurationError: If the descriptor is invalid
    """
    if not isinstance(mutations, str):
        raise ConfigurationError(f"mutations must be a string, got {mutations!r}")

    mutation_chars = list(mutations)
    abbreviations = []

    for gene in gene_pool.genes:
        dominant = gene.dominant_abbreviation
        recessive = gene.recessive_abbreviation
        abbreviations.extend([dominant, recessive])

        _verify(not (dominant in mutation_chars and recessive in mutation_chars),
                f"{dominant} and {recessive} are mutually exclusive")

        if dominant in mutation_chars:
            gene_pool.set_initial_dominant_allele(gene, gene.mutant_allele)
        elif recessive in mutation_chars:
            gene_pool.set_initial_dominant_allele(gene, gene.normal_allele)

    _verify(all(char in abbreviations for char in mutation_chars),
            f"{mutations} contains an invalid character")
    _verify(len(set(mutation_chars)) == len(mutation_chars),
            f"{mutations} contains a duplicate")

    return mutation_chars


def parse_population(
    gene_pool: GenePool,
    mutation_chars: List[str],
    population: List[str],
    max_population: int = DEFAULT_MAX_POPULATION
) -> List[BunnyVariety]:
    """
    Parse the population descriptor.

    Args:
        gene_pool: Gene pool, with dominance already set by parse_mutations
        mutation_chars: Allele abbreviations returned by parse_mutations
        population: Population descriptor
        max_population: The total count must be less than this

    Returns:
        One BunnyVariety per expression

    Raises:
        ConfigurationError: If the descriptor is invalid
    """
    if isinstance(population, str) or not isinstance(population, list):
        raise ConfigurationError(f"population must be a list of strings, got {population!r}")

    varieties: List[BunnyVariety] = []

    if not mutation_chars:

        # No mutations, so population is just a count
        count_error = "population must be a positive integer"
        _verify(len(population) == 1, count_error)
        count = _parse_count(str(population[0]), count_error)
        _verify(count < max_population, f"the total population must be < {max_population}")
        varieties.append(create_bunny_variety(gene_pool, count, ''))
        return varieties

    _verify(len(population) > 0, "population is required")
    total_count = 0
    for expression in population:
        expression = str(expression)

        # Split the expression into count and genotype, e.g. '35FFeEtt' -> '35', 'FFeEtt'
        match = _EXPRESSION_PATTERN.search(expression)
        _verify(match is not None, f"{expression} is missing a genotype")
        count_string = expression[:match.start()]
        genotype_string = expression[match.start():]

        count = _parse_count(count_string, f"{expression} must start with a positive integer")
        total_count += count
        _verify(total_count < max_population, f"the total population must be < {max_population}")

        _verify_genotype(gene_pool, mutation_chars, genotype_string)
        varieties.append(create_bunny_variety(gene_pool, count, genotype_string))

    _verify(total_count > 0, "the total population must be > 0")
    return varieties


def _verify_genotype(gene_pool: GenePool, mutation_chars: List[str], genotype_string: str) -> None:
    """A genotype has exactly 2 adjacent abbreviations for each gene named in mutations, and nothing else."""
    error = f"{genotype_string} is an invalid genotype"
    _verify(len(genotype_string) == 2 * len(mutation_chars), error)

    genotype_chars = list(genotype_string)
    for gene in gene_pool.genes:
        dominant = gene.dominant_abbreviation
        recessive = gene.recessive_abbreviation
        if dominant not in mutation_chars and recessive not in mutation_chars:
            _verify(dominant not in genotype_chars and recessive not in genotype_chars, error)
            continue

        positions = [i for i, char in enumerate(genotype_chars) if char in (dominant, recessive)]
        _verify(len(positions) == 2, error)
        _verify(positions[1] == positions[0] + 1, error)


def create_bunny_variety(gene_pool: GenePool, count: int, genotype_string: str) -> BunnyVariety:
    """
    Convert a parsed expression to a BunnyVariety.
    Genes not present in the genotype default to homozygous normal.
    """
    pairs = {}
    for gene in (FUR, EARS, TEETH):
        alleles = [
            _abbreviation_to_allele(gene_pool, gene, char)
            for char in genotype_string
            if char in (gene.dominant_abbreviation, gene.recessive_abbreviation)
        ]
        if alleles:
            pairs[gene] = GenePair(gene, alleles[0], alleles[1])
        else:
            pairs[gene] = GenePair.homozygous(gene, gene.normal_allele)

    return BunnyVariety(
        count=count,
        genotype_string=genotype_string,
        fur_pair=pairs[FUR],
        ears_pair=pairs[EARS],
        teeth_pair=pairs[TEETH]
    )


def _abbreviation_to_allele(gene_pool: GenePool, gene: Gene, abbreviation: str):
    dominant_allele = gene_pool.get_dominant_allele(gene)
    if dominant_allele is None:
        raise ConfigurationError(f"{gene.name} has no mutation, so {abbreviation} is not allowed")
    is_mutant_dominant = dominant_allele is gene.mutant_allele
    is_abbreviation_dominant = abbreviation == gene.dominant_abbreviation
    return gene.mutant_allele if is_mutant_dominant == is_abbreviation_dominant else gene.normal_allele


def _parse_count(count_string: str, error: str) -> int:
    _verify(count_string.isascii() and count_string.isdigit(), error)
    count = int(count_string)
    _verify(count > 0, error)
    return count


def _verify(predicate: bool, message: str) -> None:
    if not predicate:
        raise ConfigurationError(message)
