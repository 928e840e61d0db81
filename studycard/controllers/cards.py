"""Card catalog and image analysis endpoints."""

import logging

from fastapi import APIRouter, File, HTTPException, UploadFile, status

from studycard.controllers.dependencies import AnalysisServiceDep, CatalogDep
from studycard.pipelines.cards import read_image_bytes, resolve_image_content_type
from studycard.services import AnalysisError, AnalysisResult, RetrievalError
from studycard.views import AnalysisResponse, AnalyzeCardRequest, CardResponse

router = APIRouter(prefix="/cards", tags=["cards"])

logger = logging.getLogger(__name__)

_IMAGE_FILE_UPLOAD = File(...)


def _analysis_failed(exc: AnalysisError) -> HTTPException:
    if isinstance(exc, RetrievalError):
        return HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"message": str(exc), "cause": exc.cause.value},
        )
    return HTTPException(
        status_code=status.HTTP_502_BAD_GATEWAY,
        detail=f"Image analysis failed: {exc}",
    )


@router.get("", response_model=list[CardResponse])
async def list_cards(catalog: CatalogDep) -> list[CardResponse]:
    """Return every configured flashcard image."""

    return [CardResponse.from_reference(reference) for reference in catalog.list()]


@router.post("/analyze", response_model=AnalysisResponse)
async def analyze_card(
    request: AnalyzeCardRequest,
    catalog: CatalogDep,
    analysis_service: AnalysisServiceDep,
) -> AnalysisResponse:
    """Extract vocabulary, sentence and reading from a card image URL."""

    if request.image_id is not None:
        try:
            reference = catalog.get(request.image_id)
        except KeyError:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Unknown card '{request.image_id}'",
            ) from None
        image_url = reference.url
        pending = analysis_service.analyze_reference(reference)
    else:
        image_url = request.url
        pending = analysis_service.analyze(image_url)

    try:
        result: AnalysisResult = await pending
    except AnalysisError as exc:
        logger.warning("Analysis failed url=%s: %s", image_url, exc)
        raise _analysis_failed(exc) from exc

    return AnalysisResponse.from_result(result)


@router.post("/analyze/upload", response_model=AnalysisResponse)
async def analyze_uploaded_card(
    analysis_service: AnalysisServiceDep,
    image_file: UploadFile = _IMAGE_FILE_UPLOAD,
) -> AnalysisResponse:
    """Analyze an image uploaded by the user instead of a catalog URL."""

    content_type = resolve_image_content_type(image_file)
    image_bytes = await read_image_bytes(image_file)

    try:
        result = await analysis_service.analyze_image_bytes(image_bytes, content_type)
    except AnalysisError as exc:
        logger.warning("Analysis failed for upload %s: %s", image_file.filename, exc)
        raise _analysis_failed(exc) from exc

    return AnalysisResponse.from_result(result)
