"""Build classifier objects from configuration."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from treemerge.tree.classifiers import CatchAllMatcher, Classifier, HasChildrenMatcher, NameMatcher
from treemerge.tree.hashing import HashApproach

from .models import ClassifierConfig, TreemergeConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClassifierSet:
    """Classifiers in priority order, with their display names and approaches."""

    classifiers: tuple[Classifier, ...]
    naming: dict[Classifier, str]
    approaches: dict[Classifier, HashApproach]


def create_classifier(config: ClassifierConfig) -> Classifier:
    """Instantiate the classifier described by *config*."""
    if config.kind == "suffix":
        return NameMatcher(
            config.name,
            suffixes=config.suffixes,
            prefixes=config.prefixes,
            conjunction=config.conjunction,
        )
    if config.kind == "has_children":
        return HasChildrenMatcher(config.name)
    if config.kind == "any":
        return CatchAllMatcher(config.name)
    raise ValueError(f"Unknown classifier kind: {config.kind!r}")


def create_classifier_set(config: TreemergeConfig) -> ClassifierSet:
    classifiers = tuple(create_classifier(c) for c in config.classifiers)
    if not isinstance(classifiers[-1], CatchAllMatcher):
        logger.warning(
            "Last classifier %r is not a catch-all; nodes matching no classifier are dropped",
            classifiers[-1].name,
        )
    return ClassifierSet(
        classifiers=classifiers,
        naming={c: c.name for c in classifiers},
        approaches={c: cc.approach for c, cc in zip(classifiers, config.classifiers)},
    )
