from .factory import ClassifierSet, create_classifier, create_classifier_set
from .loader import load_config
from .models import (
    ClassifierConfig,
    HashingConfig,
    OutputConfig,
    ScanConfig,
    TreemergeConfig,
)

__all__ = [
    "ClassifierConfig",
    "ClassifierSet",
    "HashingConfig",
    "OutputConfig",
    "ScanConfig",
    "TreemergeConfig",
    "create_classifier",
    "create_classifier_set",
    "load_config",
]
