import logging
import math
from functools import lru_cache
from pathlib import Path
from typing import Dict, Any, List, Optional, Union

import yaml

from .definitions import CATALOG_FILES
from .models import (
    CatalogValidationError,
    DimensionSpec,
    QuestionCatalog,
    QuestionType,
    ScoringModel,
    UnknownScoringModelError,
)

logger = logging.getLogger(__name__)

ASSETS_DIR = Path(__file__).parent / "assets"


def _validate_partition(catalog: QuestionCatalog, partition: List[DimensionSpec], kind: str):
    """Checks one dimension partition against the question list and recomputes its maxima."""
    names = set()
    assigned = set()
    for dim in partition:
        if dim.name in names:
            raise CatalogValidationError(f"Duplicate {kind} name found: {dim.name}")
        names.add(dim.name)

        derived_max = 0.0
        for qid in dim.questions:
            question = catalog.get_question(qid)
            if question is None:
                raise CatalogValidationError(f"{kind} '{dim.name}' references unknown question {qid}")
            if question.type == QuestionType.OPEN:
                raise CatalogValidationError(f"{kind} '{dim.name}' references open question {qid}")
            if qid in assigned:
                raise CatalogValidationError(f"Question {qid} is assigned to more than one {kind}")
            if question.dimension != dim.name:
                raise CatalogValidationError(
                    f"Question {qid} is tagged '{question.dimension}' but listed under {kind} '{dim.name}'"
                )
            assigned.add(qid)
            derived_max += question.max_value

        if not math.isclose(derived_max, dim.max_score, abs_tol=1e-9):
            raise CatalogValidationError(
                f"{kind} '{dim.name}' documents max_score {dim.max_score} but its questions sum to {derived_max}"
            )
    return names


def load_catalog_data(data: Dict[str, Any]) -> QuestionCatalog:
    """
    Validates raw catalog data against the QuestionCatalog model and checks
    the cross references pydantic cannot see: unique ids, option lists,
    dimension tags and each dimension's documented maximum.
    """
    catalog = QuestionCatalog.model_validate(data)

    question_ids = set()
    for question in catalog.questions:
        if question.id in question_ids:
            raise CatalogValidationError(f"Duplicate question ID found: {question.id}")
        question_ids.add(question.id)

        if question.type == QuestionType.CHOICE:
            if not question.options:
                raise CatalogValidationError(f"Choice question {question.id} has no options")
            for option in question.options:
                if option.value < 0 or not math.isfinite(option.value):
                    raise CatalogValidationError(
                        f"Question {question.id} option '{option.label}' has invalid value {option.value}"
                    )

    dimension_names = _validate_partition(catalog, catalog.dimensions, "dimension")
    pattern_names = _validate_partition(catalog, catalog.behavior_patterns, "behavior pattern")

    known_tags = dimension_names | pattern_names
    for question in catalog.questions:
        if question.dimension is not None and question.dimension not in known_tags:
            raise CatalogValidationError(
                f"Question {question.id} references unknown dimension '{question.dimension}'"
            )

    return catalog


def load_catalog_from_file(file_path: Union[str, Path]) -> QuestionCatalog:
    """
    Loads a question catalog from a YAML file, validates it,
    and returns a QuestionCatalog object.
    """
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        raise CatalogValidationError(f"File not found: {file_path}")
    except yaml.YAMLError as e:
        raise CatalogValidationError(f"Error parsing YAML file {file_path}: {e}")

    if not isinstance(data, dict):
        raise CatalogValidationError(f"YAML file is empty or invalid: {file_path}")

    return load_catalog_data(data)


def resolve_scoring_model(model: Union[str, ScoringModel]) -> ScoringModel:
    try:
        return ScoringModel(model)
    except ValueError:
        known = ", ".join(m.value for m in ScoringModel)
        raise UnknownScoringModelError(f"Unknown scoring model '{model}'. Expected one of: {known}")


def get_catalog(model: Union[str, ScoringModel], catalog_dir: Optional[str] = None) -> QuestionCatalog:
    """Returns the catalog for a scoring model, loading it once per process."""
    scoring_model = resolve_scoring_model(model)
    base_dir = str(Path(catalog_dir)) if catalog_dir else None
    return _load_catalog(scoring_model, base_dir)


@lru_cache(maxsize=None)
def _load_catalog(scoring_model: ScoringModel, catalog_dir: Optional[str]) -> QuestionCatalog:
    path = (Path(catalog_dir) if catalog_dir else ASSETS_DIR) / CATALOG_FILES[scoring_model]
    catalog = load_catalog_from_file(path)
    logger.info(
        "Loaded question catalog",
        extra={"scoring_model": scoring_model.value, "catalog_version": catalog.version,
               "question_count": len(catalog.questions), "path": str(path)},
    )
    return catalog
