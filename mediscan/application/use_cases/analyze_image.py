from __future__ import annotations

import base64
import binascii
import json
import logging
import re
from typing import Any

from mediscan.application.dto.analyze import AnalyzeImageInput, AnalyzeImageOutput, ImagePayload
from mediscan.application.ports.vision_port import VisionPort
from mediscan.domain.exceptions import BadRequestError, VisionAnalysisError


logger = logging.getLogger(__name__)

_DATA_URL_RE = re.compile(r"^data:(?P<mime>image/[A-Za-z0-9.+-]+);base64,(?P<data>.+)$", re.DOTALL)
_CODE_FENCE_RE = re.compile(r"^```(?:json)?\s*(?P<body>.*?)\s*```$", re.DOTALL)

MEDICINE_ANALYSIS_PROMPT = """\
Analyze the image of a medicine (packaging, label or leaflet) and return a single JSON object
with exactly these sections, using null for anything that cannot be determined:
product_identification {medicine_name, brands, dosage_form, strength, code},
ingredients_and_allergens {active_ingredients, inactive_ingredients, allergens, warnings},
usage_information {indications, directions_for_use, contraindications, side_effects, uses},
pricing_information {price, price_per_tablet},
safety_and_storage {storage_conditions, manufacture_date, expiry_date, warnings},
additional_details {categories, manufacturer, batch_number},
search {google_search_url} where the URL is https://www.google.com/search?q=<url-encoded medicine name>.
Return only valid JSON without any markdown formatting."""


def parse_image_data_url(image: str | None) -> ImagePayload:
    if not image:
        raise BadRequestError("Image is required")
    match = _DATA_URL_RE.match(image.strip())
    if match is None:
        raise BadRequestError("Invalid image format")
    data = re.sub(r"\s+", "", match.group("data"))
    try:
        base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise BadRequestError("Invalid image format") from exc
    return ImagePayload(mime_type=match.group("mime"), data_base64=data)


def parse_analysis(text: str) -> dict[str, Any]:
    body = text.strip()
    fenced = _CODE_FENCE_RE.match(body)
    if fenced is not None:
        body = fenced.group("body")
    try:
        parsed = json.loads(body)
    except json.JSONDecodeError as exc:
        raise VisionAnalysisError() from exc
    if not isinstance(parsed, dict):
        raise VisionAnalysisError()
    return parsed


class AnalyzeImageUseCase:
    def __init__(self, *, vision_port: VisionPort):
        self._vision_port = vision_port

    def execute(self, command: AnalyzeImageInput) -> AnalyzeImageOutput:
        image = parse_image_data_url(command.image)
        text = self._vision_port.analyze(image=image, prompt=MEDICINE_ANALYSIS_PROMPT)
        analysis = parse_analysis(text)
        logger.info(
            "analyze_image: parsed mime=%s sections=%s",
            image.mime_type,
            len(analysis),
        )
        return AnalyzeImageOutput(analysis=analysis)
