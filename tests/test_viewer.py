import base64
import json

import httpx
import pytest

from tests.conftest import PNG_DATA_URL
from viewer.gateway_client import GatewayClient, GatewayError
from viewer.session import ViewerSession
from viewer.upload import InvalidFileType, load_image_as_data_url, to_data_url, validate_image_type

GATEWAY = "http://gateway.test/api/analyze-flowchart"
PNG_BYTES = base64.b64decode(PNG_DATA_URL.split(",", 1)[1])


def gateway_client(handler) -> GatewayClient:
    return GatewayClient(url=GATEWAY, http_client=httpx.Client(transport=httpx.MockTransport(handler)))


def reply(status: int, payload):
    def handler(request: httpx.Request) -> httpx.Response:
        handler.requests.append(request)
        return httpx.Response(status, json=payload)

    handler.requests = []
    return handler


class TestUpload:
    @pytest.mark.parametrize("mime", ["image/jpeg", "image/jpg", "image/png"])
    def test_allowed_types(self, mime):
        assert validate_image_type(mime) == mime

    @pytest.mark.parametrize("mime", ["image/gif", "image/webp", "application/pdf", None])
    def test_rejected_types(self, mime):
        with pytest.raises(InvalidFileType):
            validate_image_type(mime)

    def test_data_url(self):
        assert to_data_url(b"abc", "image/png") == "data:image/png;base64,YWJj"

    def test_load_png(self, tmp_path):
        path = tmp_path / "chart.png"
        path.write_bytes(PNG_BYTES)
        assert load_image_as_data_url(path) == PNG_DATA_URL

    def test_load_jpg(self, tmp_path):
        path = tmp_path / "chart.jpg"
        path.write_bytes(b"\xff\xd8\xff")
        assert load_image_as_data_url(path).startswith("data:image/jpeg;base64,")


class TestGatewayClient:
    def test_success(self):
        handler = reply(200, {"explanations": [{"term": "Start", "explanation": "Entry point"}]})
        result = gateway_client(handler).analyze(PNG_DATA_URL)

        assert [(e.term, e.explanation) for e in result] == [("Start", "Entry point")]
        assert json.loads(handler.requests[0].content) == {"imageBase64": PNG_DATA_URL}

    def test_error_envelope(self):
        with pytest.raises(GatewayError) as exc_info:
            gateway_client(reply(500, {"error": "Upstream error: 429"})).analyze(PNG_DATA_URL)
        assert exc_info.value.message == "Upstream error: 429"
        assert exc_info.value.status_code == 500

    def test_non_2xx_without_envelope(self):
        def handler(request):
            return httpx.Response(502, text="Bad gateway")

        with pytest.raises(GatewayError) as exc_info:
            gateway_client(handler).analyze(PNG_DATA_URL)
        assert exc_info.value.status_code == 502

    def test_missing_explanations(self):
        with pytest.raises(GatewayError, match="No explanations received"):
            gateway_client(reply(200, {})).analyze(PNG_DATA_URL)

    def test_network_failure(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(GatewayError, match="Could not reach"):
            gateway_client(handler).analyze(PNG_DATA_URL)


class TestViewerSession:
    def make_image(self, tmp_path, name="chart.png"):
        path = tmp_path / name
        path.write_bytes(PNG_BYTES)
        return path

    def test_rejects_wrong_type_without_upload(self, tmp_path):
        handler = reply(200, {"explanations": []})
        session = ViewerSession(client=gateway_client(handler))

        assert session.upload(self.make_image(tmp_path, "chart.gif")) is False
        assert handler.requests == []
        assert session.image_base64 is None
        assert session.notifications[-1].title == "Invalid file type"
        assert session.notifications[-1].variant == "destructive"

    def test_success_replaces_previous_list(self, tmp_path):
        handler = reply(200, {"explanations": [
            {"term": "Start", "explanation": "s"},
            {"term": "End", "explanation": "e"},
        ]})
        session = ViewerSession(client=gateway_client(handler))
        session.explanations = []

        assert session.upload(self.make_image(tmp_path)) is True
        assert [e.term for e in session.explanations] == ["Start", "End"]
        assert session.notifications[-1].title == "Analysis complete!"
        assert session.notifications[-1].description == "Found 2 concepts to explain"
        assert len(session.card_toggles) == 2
        assert session.play_all_toggle.text == "Start: s. Next topic: End: e"
        assert not session.is_analyzing

    def test_error_envelope_leaves_list_empty(self, tmp_path):
        ok = reply(200, {"explanations": [{"term": "Start", "explanation": "s"}]})
        session = ViewerSession(client=gateway_client(ok))
        session.upload(self.make_image(tmp_path))
        assert len(session.explanations) == 1

        session.client = gateway_client(reply(500, {"error": "Upstream error: 429"}))
        assert session.analyze() is False

        assert session.explanations == []
        assert session.play_all_toggle is None
        assert session.notifications[-1].title == "Analysis failed"
        assert session.notifications[-1].description == "Upstream error: 429"
        assert session.can_analyze

    def test_analyze_without_image(self):
        session = ViewerSession(client=gateway_client(reply(200, {"explanations": []})))

        assert session.analyze() is False
        assert session.notifications[-1].title == "No image uploaded"

    def test_in_flight_blocks_resubmission(self, tmp_path):
        handler = reply(200, {"explanations": []})
        session = ViewerSession(client=gateway_client(handler))
        session.select_image(self.make_image(tmp_path))
        session.is_analyzing = True

        assert not session.can_upload
        assert not session.can_analyze
        assert session.analyze() is False
        assert session.select_image(self.make_image(tmp_path)) is False
        assert handler.requests == []

    def test_dismiss_notification(self):
        session = ViewerSession(client=gateway_client(reply(200, {"explanations": []})))
        session.analyze()
        session.dismiss(0)
        assert session.notifications == []


class TestGatewayClientLifecycle:
    def test_context_manager_closes_http_client(self):
        http = httpx.Client(transport=httpx.MockTransport(reply(200, {"explanations": []})))
        with GatewayClient(url=GATEWAY, http_client=http) as client:
            assert client.analyze(PNG_DATA_URL) == []
        assert http.is_closed
