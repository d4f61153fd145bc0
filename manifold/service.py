"""
Asset Service - facade between asset pipelines and the engine.

The service:
1. Accepts raw or modelled essences and variants
2. Calls the generator, conversion engine and validator
3. Folds engine exceptions into OperationResult error codes
4. Attaches advisory validation findings as warnings

This layer is transport-agnostic; callers hand results to persistence or
broadcast layers with model_dump().
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any

from .config import EngineConfig
from .errors import FormatError, StatusTransitionError, ThresholdError
from .essence import CoreEssence, create_essence, rank_by_compatibility
from .registry import GameRegistry, InMemoryGameRegistry
from .requests import (
    ConvertVariantRequest,
    CreateVariantRequest,
    ErrorCode,
    OperationResult,
    RankCandidatesRequest,
)
from .utils.logger import get_logger
from .validation import ConsistencyValidator, ValidationReport
from .variants import (
    ConversionEngine,
    ConversionOptions,
    GameVariant,
    VariantGenerator,
    validate_variant_data,
)

logger = get_logger(__name__)


@dataclass
class AssetService:
    """
    Main entry point for asset pipelines.

    Usage:
        service = AssetService(registry=registry)

        essence = service.create_essence({"archetype": "dragon", ...}).value

        result = service.create_variant(CreateVariantRequest(essence, "realm_quest"))
        if result.success:
            variant = result.value["variant"]
    """
    registry: GameRegistry | None = None
    config: EngineConfig | None = None

    generator: VariantGenerator = field(init=False)
    converter: ConversionEngine = field(init=False)
    validator: ConsistencyValidator = field(init=False)

    def __post_init__(self):
        self.registry = self.registry or InMemoryGameRegistry()
        self.config = self.config or EngineConfig()
        self.generator = VariantGenerator(registry=self.registry, config=self.config)
        self.converter = ConversionEngine(self.generator)
        self.validator = ConsistencyValidator(self.config)

    def create_essence(self, data: dict[str, Any]) -> OperationResult:
        """Create a scored essence; advisory findings come back as warnings."""
        try:
            essence = create_essence(**data)
        except FormatError as e:
            return _format_failure(e)

        report = self.validator.validate_essence(essence)
        return OperationResult.ok(essence, warnings=_warning_messages(report))

    def create_variant(self, request: CreateVariantRequest) -> OperationResult:
        """
        Create a variant for one game.

        The value is {"variant": GameVariant, "validation": ValidationReport};
        validation is None when the request opts out of it.
        """
        try:
            essence = self._resolve_essence(request.essence)
            generation = self.generator.generate(
                essence,
                request.game_id,
                asset_type=request.asset_type,
                customizations=request.customizations,
            )
        except FormatError as e:
            return _format_failure(e)

        warnings = list(generation.warnings)
        report = None
        if request.validate:
            report = self.validator.validate_variant(
                generation.variant,
                essence=essence,
                game_info=self.registry.get_game(request.game_id),
            )
            warnings.extend(_warning_messages(report))

        return OperationResult.ok(
            {"variant": generation.variant, "validation": report},
            warnings=warnings,
        )

    def update_variant(self, variant: GameVariant, updates: dict[str, dict[str, Any]]) -> OperationResult:
        try:
            updated = self.generator.update_variant(variant, updates)
        except FormatError as e:
            return _format_failure(e)
        return OperationResult.ok(updated)

    def deprecate_variant(self, variant: GameVariant, migration_target: str | None = None) -> OperationResult:
        try:
            updated = self.generator.deprecate_variant(variant, migration_target)
        except StatusTransitionError as e:
            return OperationResult.fail(ErrorCode.STATUS_ERROR, str(e))
        warnings = [] if migration_target else ["Deprecated without a migration target"]
        return OperationResult.ok(updated, warnings=warnings)

    def convert_variant(self, request: ConvertVariantRequest) -> OperationResult:
        """Convert a variant; the value is a ConversionResult."""
        try:
            essence = self._resolve_essence(request.essence)
            source = self._resolve_variant(request.source_variant)
            result = self.converter.convert_variant(
                source, essence, request.target_game_id, _options(request)
            )
        except FormatError as e:
            return _format_failure(e)
        except ThresholdError as e:
            return OperationResult.fail(
                ErrorCode.THRESHOLD_ERROR,
                str(e),
                [f"quality={e.quality:.3f}", f"threshold={e.threshold:.3f}"],
            )
        return OperationResult.ok(result, warnings=list(result.warnings))

    def preview_conversion(self, request: ConvertVariantRequest) -> OperationResult:
        """
        Preview a conversion for discovery.

        Never fails on quality: result.meets_threshold reports the outcome.
        """
        try:
            essence = self._resolve_essence(request.essence)
            source = self._resolve_variant(request.source_variant)
            result = self.converter.preview_conversion(
                source, essence, request.target_game_id, _options(request)
            )
        except FormatError as e:
            return _format_failure(e)
        return OperationResult.ok(result, warnings=list(result.warnings))

    def validate_essence(self, data: CoreEssence | dict[str, Any]) -> OperationResult:
        report = self.validator.validate_essence(data)
        return _report_result(report)

    def validate_variant(
        self,
        variant: GameVariant | dict[str, Any],
        essence: CoreEssence | None = None,
    ) -> OperationResult:
        game_id = variant.game_id if isinstance(variant, GameVariant) else variant.get("game_id")
        game_info = self.registry.get_game(game_id) if game_id else None
        report = self.validator.validate_variant(variant, essence=essence, game_info=game_info)
        return _report_result(report)

    def rank_candidates(self, request: RankCandidatesRequest) -> OperationResult:
        """Rank essences by compatibility; the value is [(essence, score), ...]."""
        try:
            reference = self._resolve_essence(request.reference)
            candidates = [self._resolve_essence(c) for c in request.candidates]
        except FormatError as e:
            return _format_failure(e)

        ranked = rank_by_compatibility(reference, candidates)
        if request.limit is not None:
            ranked = ranked[:request.limit]
        return OperationResult.ok(ranked)

    def _resolve_essence(self, essence: CoreEssence | dict[str, Any]) -> CoreEssence:
        if isinstance(essence, CoreEssence):
            return essence
        return create_essence(**essence)

    def _resolve_variant(self, variant: GameVariant | dict[str, Any]) -> GameVariant:
        if isinstance(variant, GameVariant):
            return variant
        # Raw variants go through the same checks as produced ones
        return validate_variant_data(variant)


def _options(request: ConvertVariantRequest) -> ConversionOptions:
    return ConversionOptions(
        preserve_properties=list(request.preserve_properties),
        accept_property_loss=request.accept_property_loss,
        quality_threshold=request.quality_threshold,
    )


def _format_failure(error: FormatError) -> OperationResult:
    logger.info(f"Rejected invalid {error.field}")
    details = [str(d.get("msg", d)) for d in error.errors]
    return OperationResult.fail(ErrorCode.FORMAT_ERROR, str(error), details)


def _report_result(report: ValidationReport) -> OperationResult:
    errors = [f"{e.field}: {e.message}" for e in report.errors]
    return OperationResult(
        success=report.valid,
        value=report,
        warnings=_warning_messages(report),
        errors=errors,
        error_code=None if report.valid else ErrorCode.FORMAT_ERROR.value,
    )


def _warning_messages(report: ValidationReport) -> list[str]:
    return [f"{w.field}: {w.message}" for w in report.warnings]
