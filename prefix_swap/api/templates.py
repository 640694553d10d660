"""Template API routes.

Handles the interactive preview of an uploaded template and the generation
of the pipeline configuration for a chosen prefix pair.
"""

import logging
from pathlib import Path

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status

from prefix_swap.api.deps import get_factory, upload_workspace
from prefix_swap.api.schemas import AnalyzeResponse, GenerateConfigRequest, GenerateConfigResponse
from prefix_swap.core.config import Settings, get_settings
from prefix_swap.core.exceptions import ArtifactIOError, ParseError
from prefix_swap.core.factory import ComponentFactory
from prefix_swap.core.pipeline_config import (
    build_pipeline_config,
    save_pipeline_config,
    validate_prefix,
)
from prefix_swap.strategies.extractors import collect_prefixes

logger = logging.getLogger(__name__)

UPLOAD_CHUNK_BYTES = 1024 * 1024

router = APIRouter(prefix="/api", tags=["templates"])


def _too_large(limit: int) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
        detail=f"File exceeds {limit} bytes",
    )


async def _store_upload(file: UploadFile, destination: Path, limit: int) -> int:
    """Copy an upload to disk chunk by chunk, stopping once it exceeds ``limit``.

    Returns:
        The number of bytes written.

    Raises:
        HTTPException: 413 if the upload is larger than ``limit``.
    """
    if file.size is not None and file.size > limit:
        raise _too_large(limit)

    size = 0
    with open(destination, "wb") as f:
        while chunk := await file.read(UPLOAD_CHUNK_BYTES):
            size += len(chunk)
            if size > limit:
                raise _too_large(limit)
            f.write(chunk)
    return size


@router.post("/upload-and-analyze", response_model=AnalyzeResponse)
async def upload_and_analyze(
    file: UploadFile = File(..., description="Template archive (.docx or .fdt)"),
    workspace: Path = Depends(upload_workspace),
    factory: ComponentFactory = Depends(get_factory),
    settings: Settings = Depends(get_settings),
) -> AnalyzeResponse:
    """List the fields and prefixes used in an uploaded template.

    The upload is stored in a temporary directory that only lives for this
    request; nothing about it is kept afterwards.

    Args:
        file: The uploaded template.
        workspace: Per-request temporary directory.
        factory: Component factory.
        settings: Process settings.

    Returns:
        AnalyzeResponse with unique field names and their prefixes.

    Raises:
        HTTPException: If the file type is unsupported, too large or unreadable.
    """
    filename = Path(file.filename or "").name
    reader = factory.get_archive_reader()

    if not filename or not reader.supports_file(filename):
        raise HTTPException(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            detail="Only .fdt and .docx files are supported",
        )

    stored_path = workspace / filename
    size = await _store_upload(file, stored_path, settings.max_upload_bytes)
    logger.info(f"Saved upload {filename} ({size} bytes) to {workspace}")

    try:
        xml = reader.read_document(stored_path)
    except ParseError as e:
        logger.warning(f"Could not read template {filename}: {e}")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

    extractor = factory.get_preview_extractor()
    names = extractor.extract(xml, "", clean_constructs=True, sort_by_length=False)
    prefixes = collect_prefixes(names)

    logger.info(f"Analyzed {filename}: {len(names)} fields, {len(prefixes)} prefixes")
    return AnalyzeResponse(
        message=f"File processed: {len(prefixes)} prefixes",
        file_name=filename,
        fields=sorted(names),
        prefixes=prefixes,
        total_fields=len(names),
        total_prefixes=len(prefixes),
    )


@router.post("/generate-config", response_model=GenerateConfigResponse)
async def generate_config(
    request: GenerateConfigRequest,
    settings: Settings = Depends(get_settings),
) -> GenerateConfigResponse:
    """Write config.json for renaming ``oldPrefix`` to ``newPrefix``.

    Raises:
        HTTPException: 400 on invalid input, 500 if the file cannot be written.
    """
    old_prefix = request.old_prefix.strip()
    new_prefix = request.new_prefix.strip()

    if not request.file_name or not old_prefix or not new_prefix:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="All fields are required",
        )

    for label, prefix in (("Old prefix", old_prefix), ("New prefix", new_prefix)):
        problem = validate_prefix(prefix)
        if problem:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"{label}: {problem}",
            )

    if old_prefix == new_prefix:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Prefixes must differ",
        )

    config = build_pipeline_config(old_prefix, new_prefix, settings.work_dir)

    try:
        config_path = save_pipeline_config(config, settings.config_path)
    except ArtifactIOError as e:
        logger.error(f"Config generation failed for {request.file_name}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not write the configuration",
        ) from e

    logger.info(f"Config for {request.file_name}: {old_prefix!r} -> {new_prefix!r}")
    return GenerateConfigResponse(file_path=str(config_path), config=config.as_dict())
