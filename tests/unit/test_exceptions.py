"""Unit tests for genbridge exceptions."""

import pytest

from genbridge.utils.exceptions import (
    CancellationError,
    ConfigurationError,
    GenbridgeError,
    HttpStatusError,
    ImageProcessingError,
    ParseError,
    RequestTimeoutError,
    StorageError,
    TransportError,
    ValidationError,
)


@pytest.mark.unit
class TestGenbridgeError:
    def test_base_is_exception(self):
        assert issubclass(GenbridgeError, Exception)

    def test_subclasses_are_genbridge_error(self):
        for cls in (
            ValidationError,
            TransportError,
            RequestTimeoutError,
            HttpStatusError,
            ParseError,
            CancellationError,
            ConfigurationError,
            ImageProcessingError,
            StorageError,
        ):
            assert issubclass(cls, GenbridgeError)

    def test_kinds_are_distinct(self):
        kinds = {
            cls.kind
            for cls in (
                GenbridgeError,
                ValidationError,
                TransportError,
                RequestTimeoutError,
                HttpStatusError,
                ParseError,
                CancellationError,
                ConfigurationError,
                ImageProcessingError,
                StorageError,
            )
        }
        assert len(kinds) == 10


@pytest.mark.unit
class TestValidationError:
    def test_message_and_field(self):
        e = ValidationError("bad value", field="prompt")
        assert str(e) == "bad value"
        assert e.field == "prompt"
        assert e.kind == "validation"

    def test_field_optional(self):
        e = ValidationError("invalid")
        assert e.field == ""


@pytest.mark.unit
class TestHttpStatusError:
    def test_message_status_response(self):
        e = HttpStatusError("failed", status_code=500, response="body")
        assert e.status_code == 500
        assert e.response == "body"
        assert e.kind == "http_status"


@pytest.mark.unit
class TestTransportError:
    def test_original_error(self):
        inner = ConnectionError("refused")
        e = TransportError("network failed", original_error=inner)
        assert e.original_error is inner
        assert e.kind == "transport"

    def test_timeout_is_transport_error(self):
        e = RequestTimeoutError("timed out")
        assert isinstance(e, TransportError)
        assert e.kind == "timeout"
        assert e.original_error is None


@pytest.mark.unit
class TestParseError:
    def test_response_snippet(self):
        e = ParseError("not json", response="<html>")
        assert e.response == "<html>"
        assert e.kind == "parse"


@pytest.mark.unit
class TestImageProcessingError:
    def test_image_path(self):
        e = ImageProcessingError("decode failed", image_path="/tmp/x.png")
        assert e.image_path == "/tmp/x.png"


@pytest.mark.unit
class TestStorageError:
    def test_path(self):
        e = StorageError("disk full", path="/tmp/AI_GEN_1.jpg")
        assert e.path == "/tmp/AI_GEN_1.jpg"
        assert e.kind == "storage"
