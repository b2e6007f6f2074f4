"""Tests for Genotype and Phenotype models."""

import pytest
import numpy as np
from bunny_sim.models.allele import (
    FUR, EARS, TEETH, GENES,
    WHITE_FUR, BROWN_FUR, STRAIGHT_EARS, FLOPPY_EARS, SHORT_TEETH, LONG_TEETH
)
from bunny_sim.models.gene_pair import GenePair
from bunny_sim.models.gene_pool import GenePool
from bunny_sim.models.genotype import Genotype, BunnyVariety
from bunny_sim.models.punnett_square import Cell


@pytest.fixture
def gene_pool():
    """Create a gene pool with no mutations."""
    return GenePool()


def _normal_cells():
    return [Cell(gene.normal_allele, gene.normal_allele) for gene in GENES]


def test_default_genotype(gene_pool):
    """Test that generation-zero bunnies are homozygous normal."""
    genotype = Genotype.create_default()
    for gene in GENES:
        pair = genotype.get_gene_pair(gene)
        assert pair.is_homozygous()
        assert pair.father_allele is gene.normal_allele
    assert genotype.mutation is None

    phenotype = genotype.get_phenotype(gene_pool)
    assert phenotype.key == (WHITE_FUR, STRAIGHT_EARS, SHORT_TEETH)


def test_genotype_validation():
    """Test that pairs must be in fur, ears, teeth order and mutation must be a mutant allele."""
    fur = GenePair.homozygous(FUR, WHITE_FUR)
    ears = GenePair.homozygous(EARS, STRAIGHT_EARS)
    teeth = GenePair.homozygous(TEETH, SHORT_TEETH)

    with pytest.raises(ValueError):
        Genotype(ears, fur, teeth)
    with pytest.raises(ValueError):
        Genotype(fur, ears, teeth, mutation=WHITE_FUR)


def test_from_cells_without_mutation():
    """Test an inherited genotype."""
    genotype = Genotype.from_cells(Cell(WHITE_FUR, BROWN_FUR), *_normal_cells()[1:])
    assert genotype.fur_pair.father_allele is WHITE_FUR
    assert genotype.fur_pair.mother_allele is BROWN_FUR
    assert genotype.mutation is None


def test_from_cells_with_mutation():
    """Test that a mutation replaces the father's allele."""
    genotype = Genotype.from_cells(*_normal_cells(), mutate_genes=[EARS])

    assert genotype.ears_pair.father_allele is FLOPPY_EARS
    assert genotype.ears_pair.mother_allele is STRAIGHT_EARS
    assert genotype.mutation is FLOPPY_EARS
    assert genotype.fur_pair.father_allele is WHITE_FUR

    with pytest.raises(ValueError):
        Genotype.from_cells(*_normal_cells(), mutate_genes=[FUR, TEETH])


def test_phenotype_follows_gene_pool(gene_pool):
    """Test that the same genotype expresses differently as dominance changes."""
    genotype = Genotype(
        GenePair(FUR, WHITE_FUR, BROWN_FUR),
        GenePair.homozygous(EARS, FLOPPY_EARS),
        GenePair(TEETH, LONG_TEETH, SHORT_TEETH)
    )

    phenotype = genotype.get_phenotype(gene_pool)
    assert phenotype.fur is WHITE_FUR
    assert phenotype.ears is FLOPPY_EARS
    assert phenotype.teeth is SHORT_TEETH

    gene_pool.schedule_mutation(FUR, mutant_is_dominant=True)
    gene_pool.schedule_mutation(TEETH, mutant_is_dominant=False)
    phenotype = genotype.get_phenotype(gene_pool)
    assert phenotype.fur is BROWN_FUR
    assert phenotype.teeth is SHORT_TEETH
    assert phenotype.get_allele(FUR) is BROWN_FUR
    assert phenotype.has_allele(FLOPPY_EARS)


def test_abbreviation_omits_genes_without_mutation(gene_pool):
    """Test genotype abbreviation."""
    genotype = Genotype(
        GenePair(FUR, BROWN_FUR, WHITE_FUR),
        GenePair.homozygous(EARS, STRAIGHT_EARS),
        GenePair.homozygous(TEETH, LONG_TEETH)
    )
    assert genotype.abbreviation(gene_pool) == ''

    gene_pool.schedule_mutation(FUR, mutant_is_dominant=True)
    assert genotype.abbreviation(gene_pool) == 'Ff'

    gene_pool.schedule_mutation(TEETH, mutant_is_dominant=False)
    assert genotype.abbreviation(gene_pool) == 'Fftt'


def test_from_variety():
    """Test building a generation-zero genotype from a variety."""
    variety = BunnyVariety(
        count=3,
        genotype_string='Ff',
        fur_pair=GenePair(FUR, BROWN_FUR, WHITE_FUR),
        ears_pair=GenePair.homozygous(EARS, STRAIGHT_EARS),
        teeth_pair=GenePair.homozygous(TEETH, SHORT_TEETH)
    )
    genotype = Genotype.from_variety(variety)
    assert genotype.fur_pair is variety.fur_pair
    assert genotype.mutation is None

    with pytest.raises(ValueError):
        BunnyVariety(0, '', variety.fur_pair, variety.ears_pair, variety.teeth_pair)
