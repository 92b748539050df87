"""Builds the navigation tree over comparisons.

Each category arranges its comparisons with its own list of levels:
    - Symmetric: Algorithm > Operation > Key size > Cipher mode > Padding
    - KDF:       Algorithm > Hash algorithm > Iterations (PBKDF2)
                 Algorithm > Parameter (Scrypt and other KDFs)
    - PQC:       Algorithm > Operation > Parameter set

The padding level only appears when a cipher mode has more than one padding.
"""

from collections.abc import Callable, Sequence
from typing import NamedTuple
from urllib.parse import quote
import logging

from cryptobench.benchmark_data import DEFAULT, Category, Comparison, HierarchyNode, KdfAlgorithm

logger = logging.getLogger(__name__)

ROOT_LABEL = 'All Benchmarks'

# Characters encodeURIComponent leaves alone.
_PATH_SAFE = "-_.!~*'()"

def encode_name(name: str) -> str:
    return quote(name, safe=_PATH_SAFE)

def join_path(base_path: str, name: str) -> str:
    encoded = encode_name(name)
    return f'{base_path}/{encoded}' if base_path else encoded

def group_by(comparisons: Sequence[Comparison], name_of: Callable[[Comparison], str]) -> dict[str, list[Comparison]]:
    """Groups comparisons by name, keeping first seen order."""
    groups: dict[str, list[Comparison]] = {}
    for comparison in comparisons:
        groups.setdefault(name_of(comparison), []).append(comparison)
    return groups

def always(groups: dict[str, list[Comparison]]) -> bool:
    return True

def has_variety(groups: dict[str, list[Comparison]]) -> bool:
    return len(groups) > 1

class Level(NamedTuple):
    """One level of a category schema.

    Attributes:
        name_of: Name of the node a comparison belongs to at this level.
        should_split: Whether the level is created, given the groups it would create.
    """
    name_of: Callable[[Comparison], str]
    should_split: Callable[[dict[str, list[Comparison]]], bool] = always

ALGORITHM = Level(lambda c: c.algorithm)
OPERATION = Level(lambda c: c.operation)
VARIANT = Level(lambda c: c.variant)
CIPHER_MODE = Level(lambda c: c.cipher_mode or DEFAULT)
PADDING = Level(lambda c: c.padding or DEFAULT, has_variety)
HASH_ALGORITHM = Level(lambda c: c.hash_algorithm or DEFAULT)
ITERATIONS = Level(lambda c: c.iterations or DEFAULT)

SYMMETRIC_LEVELS = (OPERATION, VARIANT, CIPHER_MODE, PADDING)
PBKDF2_LEVELS = (HASH_ALGORITHM, ITERATIONS)
KDF_LEVELS = (ITERATIONS,)
PQC_LEVELS = (OPERATION, VARIANT)

def levels_below_algorithm(category: Category, algorithm: str) -> tuple[Level, ...]:
    match category, KdfAlgorithm.of(algorithm):
        case Category.SYMMETRIC, _:
            return SYMMETRIC_LEVELS
        case Category.KDF, KdfAlgorithm.PBKDF2:
            return PBKDF2_LEVELS
        case Category.KDF, _:
            return KDF_LEVELS
        case Category.PQC, _:
            return PQC_LEVELS
        case _:
            return ()

def build_levels(comparisons: Sequence[Comparison], levels: Sequence[Level], base_path: str) -> list[HierarchyNode]:
    """Groups comparisons by the first level and recurses into the rest.

    Returns no nodes when there are no levels left, or when the first level
    decides not to split.
    """
    if len(levels) == 0:
        return []
    level, remaining = levels[0], levels[1:]

    groups = group_by(comparisons, level.name_of)
    if not level.should_split(groups):
        return []

    nodes = []
    for name, group in groups.items():
        path = join_path(base_path, name)
        nodes.append(HierarchyNode(name, path, build_levels(group, remaining, path), group))
    return nodes

def build_category(category: Category, comparisons: list[Comparison]) -> HierarchyNode:
    node = HierarchyNode(category.value, category.value, [], comparisons)
    for algorithm, group in group_by(comparisons, ALGORITHM.name_of).items():
        path = join_path(node.path, algorithm)
        levels = levels_below_algorithm(category, algorithm)
        node.children.append(HierarchyNode(algorithm, path, build_levels(group, levels, path), group))
    return node

def sort_hierarchy(node: HierarchyNode, case_sensitive: bool = True) -> HierarchyNode:
    """Sorts the children of every node by name, depth first from ``node``."""
    key = (lambda child: child.name) if case_sensitive else (lambda child: (child.name.casefold(), child.name))
    node.children.sort(key=key)
    for child in node.children:
        sort_hierarchy(child, case_sensitive)
    return node

def build_hierarchy(comparisons: Sequence[Comparison], root_label: str = ROOT_LABEL, case_sensitive: bool = True) -> HierarchyNode:
    """Builds a sorted navigation tree from scratch.

    Args:
        comparisons: Every comparison to navigate.
        root_label: Name of the root node.
        case_sensitive: Whether sibling names are ordered case sensitively.

    Returns:
        HierarchyNode: Root node, with an empty path, holding all comparisons.
    """
    root = HierarchyNode(root_label, '', [], list(comparisons))

    for category_name, group in group_by(root.comparisons, lambda c: c.category).items():
        root.children.append(build_category(Category(category_name), group))

    logger.debug(f'Built hierarchy over {len(root.comparisons)} comparisons in {len(root.children)} categories')
    return sort_hierarchy(root, case_sensitive)
