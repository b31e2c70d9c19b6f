import logging
from typing import List, Optional

import httpx
from pydantic import ValidationError

import config
from schemas import AnalysisResponse, Explanation

logger = logging.getLogger(__name__)


class GatewayError(Exception):
    """Network failure, non-2xx status or an error envelope from the gateway."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class GatewayClient:
    def __init__(
        self,
        url: Optional[str] = None,
        timeout: Optional[float] = None,
        http_client: Optional[httpx.Client] = None,
    ):
        self.url = url or config.GATEWAY_URL
        self.http = http_client or httpx.Client(
            timeout=timeout if timeout is not None else config.CLIENT_TIMEOUT
        )

    def analyze(self, image_base64: str) -> List[Explanation]:
        try:
            response = self.http.post(self.url, json={"imageBase64": image_base64})
        except httpx.HTTPError as e:
            raise GatewayError(f"Could not reach analysis service: {e}") from e

        try:
            data = response.json()
        except ValueError:
            data = None

        if isinstance(data, dict) and data.get("error"):
            raise GatewayError(str(data["error"]), response.status_code)
        if not response.is_success:
            raise GatewayError(f"Analysis service returned {response.status_code}", response.status_code)
        if not isinstance(data, dict) or "explanations" not in data:
            raise GatewayError("No explanations received", response.status_code)

        try:
            return AnalysisResponse.model_validate(data).explanations
        except ValidationError as e:
            raise GatewayError("Malformed explanations received", response.status_code) from e

    def close(self) -> None:
        self.http.close()

    def __enter__(self) -> "GatewayClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
