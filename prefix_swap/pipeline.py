"""Stage runners for the file-based prefix swap pipeline.

Executes the three stages in order:
1. Analyzer -> 2. Generator -> 3. Replacer

Each runner receives its stage configuration by value, validates its inputs
before touching any file, computes its result fully in memory and only then
writes its output artifact. An artifact written by an earlier stage is left
in place when a later stage fails.
"""

import time
from dataclasses import dataclass
from pathlib import Path

import structlog

from prefix_swap.core.factory import ComponentFactory
from prefix_swap.core.pipeline_config import (
    AnalyzerConfig,
    GeneratorConfig,
    PipelineConfig,
    ReplacerConfig,
)
from prefix_swap.engine import (
    ReplacementMap,
    ReplacementReport,
    VerificationResult,
    apply_replacements,
    build_replacement_map,
    report_coverage,
    verify_replacements,
)
from prefix_swap.engine.artifacts import (
    load_replacement_map,
    load_unique_names,
    read_document,
    save_replacement_map,
    save_unique_names,
    write_document,
)
from prefix_swap.interfaces.extractor import UniqueNameSet

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class AnalyzerResult:
    names: UniqueNameSet
    output_path: Path


@dataclass(frozen=True)
class GeneratorResult:
    replacement_map: ReplacementMap
    output_path: Path


@dataclass(frozen=True)
class ReplacerResult:
    report: ReplacementReport
    verification: VerificationResult | None
    output_path: Path
    elapsed_ms: float


@dataclass(frozen=True)
class PipelineResult:
    analyzer: AnalyzerResult
    generator: GeneratorResult
    replacer: ReplacerResult


def run_analyzer(config: AnalyzerConfig, factory: ComponentFactory | None = None) -> AnalyzerResult:
    """Extract unique prefixed field names from the input document.

    Args:
        config: Analyzer section of the pipeline configuration.
        factory: Component factory used to pick the extraction strategy.

    Returns:
        The extracted names and the artifact path.

    Raises:
        ConfigurationError: If the input document is missing or the strategy is unknown.
        ArtifactIOError: If reading or writing fails.
    """
    log = logger.bind(stage="analyzer")
    config.check_inputs()
    factory = factory or ComponentFactory()
    extractor = factory.get_extractor(config.strategy)

    log.info(
        "analysis started",
        input_file=config.input_file,
        prefix=config.original_prefix,
        strategy=extractor.name,
    )

    text = read_document(config.input_file)
    names = extractor.extract(
        text,
        config.original_prefix,
        clean_constructs=config.clean_logical_constructions,
        sort_by_length=config.sort_by_length,
    )

    save_unique_names(
        config.output_file,
        names,
        config_used=config.as_dict(),
        input_file=config.input_file,
    )

    log.info(
        "analysis complete",
        tokens=names.token_count,
        matched=names.matched_count,
        unique=len(names),
        output_file=config.output_file,
    )
    return AnalyzerResult(names=names, output_path=Path(config.output_file))


def run_generator(config: GeneratorConfig) -> GeneratorResult:
    """Build the replacement map from the analyzer artifact.

    Raises:
        ConfigurationError: If the analyzer artifact path does not exist.
        MissingInputError: If the artifact cannot be parsed.
        MalformedInputError: If the artifact lacks originalPrefix.
    """
    log = logger.bind(stage="generator")
    config.check_inputs()

    log.info("generation started", input_file=config.input_file, new_prefix=config.new_prefix)

    analysis = load_unique_names(config.input_file)
    replacement_map = build_replacement_map(
        analysis.unique_names,
        analysis.original_prefix,
        config.new_prefix,
    )

    save_replacement_map(
        config.output_file,
        replacement_map,
        config_used=config.as_dict(),
        analysis_file=config.input_file,
    )

    log.info(
        "generation complete",
        original_prefix=analysis.original_prefix,
        entries=len(replacement_map),
        output_file=config.output_file,
    )
    return GeneratorResult(replacement_map=replacement_map, output_path=Path(config.output_file))


def run_replacer(config: ReplacerConfig) -> ReplacerResult:
    """Apply the replacement map to the input document.

    Residual original forms after substitution are reported through a
    CoverageWarning; the output has been written by then.

    Raises:
        ConfigurationError: If the document or map path does not exist.
        MissingInputError: If the map cannot be parsed.
        MalformedInputError: If the map lacks required fields.
        ArtifactIOError: If reading or writing fails.
    """
    log = logger.bind(stage="replacer")
    config.check_inputs()

    log.info(
        "replacement started",
        input_file=config.input_file,
        map_file=config.replacement_map_file,
        output_file=config.output_file,
    )

    text = read_document(config.input_file)
    replacement_map = load_replacement_map(config.replacement_map_file)

    started = time.perf_counter()
    result, report = apply_replacements(text, replacement_map)
    elapsed_ms = (time.perf_counter() - started) * 1000

    write_document(config.output_file, result)

    verification = None
    if config.verify:
        verification = verify_replacements(result, replacement_map)
        report_coverage(verification)

    log.info(
        "replacement complete",
        replacements=report.total,
        elapsed_ms=round(elapsed_ms, 1),
        clean=verification.all_clean if verification else None,
    )
    return ReplacerResult(
        report=report,
        verification=verification,
        output_path=Path(config.output_file),
        elapsed_ms=elapsed_ms,
    )


def run_pipeline(config: PipelineConfig, factory: ComponentFactory | None = None) -> PipelineResult:
    """Run analyzer, generator and replacer in order.

    Sections and the source document are validated before the first stage
    starts. Stage artifacts produced by an earlier stage are inputs of the
    next one, so they are checked when that stage begins.
    """
    analyzer_config = config.section("analyzer")
    generator_config = config.section("generator")
    replacer_config = config.section("replacer")

    analyzer_config.check_inputs()
    ReplacerConfig.check_path("inputFile", replacer_config.input_file)

    analyzer = run_analyzer(analyzer_config, factory)
    generator = run_generator(generator_config)
    replacer = run_replacer(replacer_config)

    return PipelineResult(analyzer=analyzer, generator=generator, replacer=replacer)
