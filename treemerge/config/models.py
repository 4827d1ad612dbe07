from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator

from treemerge.tree.hashing import HashApproach


class ClassifierConfig(BaseModel):
    name: str = Field(min_length=1)
    kind: Literal["suffix", "has_children", "any"] = "suffix"
    suffixes: list[str] = Field(default_factory=list)
    prefixes: list[str] = Field(default_factory=list)
    conjunction: bool = False
    approach: HashApproach = HashApproach.EXACT_COUNT

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("classifier name must not be blank")
        return v

    @model_validator(mode="after")
    def _suffix_kind_needs_patterns(self) -> "ClassifierConfig":
        if self.kind == "suffix" and not (self.suffixes or self.prefixes):
            raise ValueError(f"classifier {self.name!r} of kind 'suffix' needs suffixes or prefixes")
        return self


def _default_classifiers() -> list[ClassifierConfig]:
    return [
        ClassifierConfig(name="ARCHIVE", suffixes=[".zip"]),
        ClassifierConfig(
            name="IMAGE",
            suffixes=[".jpeg", ".jpg", ".png", ".PNG", ".JPEG", ".JPG"],
            approach=HashApproach.DIFFERENCIATE_NONE_ONE_MULTIPLE,
        ),
        ClassifierConfig(name="TEXT", suffixes=[".txt"]),
        ClassifierConfig(name="DIRECTORY", kind="has_children"),
        ClassifierConfig(name="OTHER", kind="any"),
    ]


class HashingConfig(BaseModel):
    duplicate_max: int = Field(default=2, gt=0)


class ScanConfig(BaseModel):
    ignore_patterns: list[str] = Field(default_factory=lambda: [
        ".git", "node_modules", "__pycache__", ".venv", ".tox"
    ])


class OutputConfig(BaseModel):
    indentation: int = Field(default=2, ge=0)


class TreemergeConfig(BaseModel):
    classifiers: list[ClassifierConfig] = Field(default_factory=_default_classifiers)
    hashing: HashingConfig = Field(default_factory=HashingConfig)
    scan: ScanConfig = Field(default_factory=ScanConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    log_level: Literal["debug", "info", "warn", "error"] = "info"

    @field_validator("classifiers")
    @classmethod
    def _unique_classifier_names(cls, v: list[ClassifierConfig]) -> list[ClassifierConfig]:
        if not v:
            raise ValueError("at least one classifier is required")
        seen: set[str] = set()
        for classifier in v:
            if classifier.name in seen:
                raise ValueError(f"duplicate classifier name: {classifier.name!r}")
            seen.add(classifier.name)
        return v
