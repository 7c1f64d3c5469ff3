# Path: lucid_key/process/scoring/score_index.py
"""
Score Index

Parses normal.sco into the per-entity, per-feature score table and the
entity profiles.

normal.sco holds two record kinds:

    <normal_score_data>
      <scoring_item item_id="STATE">
        <scored_item item_id="ENTITY" value="1"/>
      </scoring_item>
    </normal_score_data>

    <numeric_score_data>
      <scoring_item item_id="FEATURE">
        <scored_item item_id="ENTITY">
          <scored_data omin="2" omax="5"/>
        </scored_item>
      </scoring_item>
    </numeric_score_data>

Every accepted score also appends a Characteristic to the entity's
profile. Scores that break the score-code or number format are skipped
or zeroed and recorded as INVALID_SCORE warnings.
"""

from typing import Optional

from lxml import etree

from ...constants import (
    ATTR_ITEM_ID,
    ATTR_OMAX,
    ATTR_OMIN,
    ATTR_VALUE,
    DEFAULT_PROFILE_GROUP,
    FeatureKind,
    TAG_NORMAL_SCORE_DATA,
    TAG_NUMERIC_SCORE_DATA,
    TAG_SCORED_DATA,
    TAG_SCORED_ITEM,
    TAG_SCORING_ITEM,
    VALID_SCORE_CODES,
    SCORE_FILE,
)
from ...core.logger import get_process_logger
from ...loaders.document_decoder import DecodedDocument, attr, children
from ...models.error import ErrorCategory, ErrorSeverity, ParsingError
from ...models.key_data import (
    Characteristic,
    EntityId,
    FeatureId,
    NumericScore,
    StateScore,
)
from ..hierarchy.model_builder import KeyCatalog
from .units import format_range, parse_leading_number


logger = get_process_logger('scoring.score_index')


class ScoreIndex:
    """
    Fills a KeyCatalog's score table and profiles from normal.sco.

    Example:
        index = ScoreIndex()
        warnings = index.apply(document, catalog)
    """

    def __init__(self):
        self.errors: list[ParsingError] = []
        self.state_scores = 0
        self.numeric_scores = 0

    def apply(self, document: DecodedDocument, catalog: KeyCatalog) -> list[ParsingError]:
        """
        Read both scoring sections into the catalog.

        Args:
            document: Decoded normal.sco (root must be present)
            catalog: Catalog produced by ModelBuilder

        Returns:
            INVALID_SCORE warnings raised while reading
        """
        self.errors = []
        self.state_scores = 0
        self.numeric_scores = 0

        for section in document.iter(TAG_NORMAL_SCORE_DATA):
            for scoring_item in children(section, TAG_SCORING_ITEM):
                self._read_state_item(scoring_item, catalog)

        for section in document.iter(TAG_NUMERIC_SCORE_DATA):
            for scoring_item in children(section, TAG_SCORING_ITEM):
                self._read_numeric_item(scoring_item, catalog)

        logger.info(
            f"Indexed {self.state_scores} state scores and "
            f"{self.numeric_scores} numeric scores"
        )
        return self.errors

    # ------------------------------------------------------------------
    # State scores
    # ------------------------------------------------------------------

    def _read_state_item(self, scoring_item: etree._Element, catalog: KeyCatalog) -> None:
        state_id = attr(scoring_item, ATTR_ITEM_ID)
        if state_id is None:
            return
        state = catalog.features.get(FeatureId(state_id))
        if state is None:
            return

        for scored_item in scoring_item.iter(TAG_SCORED_ITEM):
            entity_id = attr(scored_item, ATTR_ITEM_ID)
            code = attr(scored_item, ATTR_VALUE)
            if entity_id is None or code is None:
                continue

            scores = catalog.entity_scores.get(EntityId(entity_id))
            if scores is None:
                continue

            if code not in VALID_SCORE_CODES:
                self._invalid(
                    f"Invalid score code '{code}' for state {state_id}, entity {entity_id}",
                    scored_item,
                    entity_id,
                )
                continue

            scores[state.id] = StateScore(value=code)
            self.state_scores += 1

            profile = catalog.entity_profiles.get(EntityId(entity_id))
            if profile is not None:
                profile.characteristics.append(Characteristic(
                    text=state.name,
                    parent_group=state.parent_name or DEFAULT_PROFILE_GROUP,
                    kind=FeatureKind.STATE,
                    score=code,
                ))

    # ------------------------------------------------------------------
    # Numeric scores
    # ------------------------------------------------------------------

    def _read_numeric_item(self, scoring_item: etree._Element, catalog: KeyCatalog) -> None:
        feature_id = attr(scoring_item, ATTR_ITEM_ID)
        if feature_id is None:
            return
        feature = catalog.features.get(FeatureId(feature_id))
        if feature is None:
            return

        for scored_item in scoring_item.iter(TAG_SCORED_ITEM):
            entity_id = attr(scored_item, ATTR_ITEM_ID)
            data = next(scored_item.iter(TAG_SCORED_DATA), None)
            if entity_id is None or data is None:
                continue

            scores = catalog.entity_scores.get(EntityId(entity_id))
            if scores is None:
                continue

            score = NumericScore(
                min=self._read_bound(data, ATTR_OMIN, entity_id),
                max=self._read_bound(data, ATTR_OMAX, entity_id),
            )
            scores[feature.id] = score
            self.numeric_scores += 1

            profile = catalog.entity_profiles.get(EntityId(entity_id))
            if profile is not None:
                profile.characteristics.append(Characteristic(
                    text=format_range(score, feature),
                    parent_group=feature.name,
                    kind=FeatureKind.NUMERIC,
                ))

    def _read_bound(self, data: etree._Element, name: str, entity_id: str) -> float:
        """
        Parse omin/omax up to the end of the leading number ('2.5mm' -> 2.5).

        Absent -> 0; no leading number -> 0 with a warning.
        """
        raw: Optional[str] = data.get(name)
        if raw is None or raw.strip() == '':
            return 0.0
        value = parse_leading_number(raw)
        if value is None:
            self._invalid(
                f"Unparseable {name} '{raw}' for entity {entity_id}",
                data,
                entity_id,
            )
            return 0.0
        return value

    def _invalid(self, message: str, element: etree._Element, entity_id: str) -> None:
        logger.warning(message)
        self.errors.append(ParsingError(
            severity=ErrorSeverity.WARNING,
            category=ErrorCategory.INVALID_SCORE,
            message=message,
            source_file=SCORE_FILE,
            line_number=element.sourceline,
            element_id=entity_id,
        ))


__all__ = ['ScoreIndex']
