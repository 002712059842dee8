"""
Tests for upload validation.
"""
import pytest

from movie_identifier.image_encoder import encode_image, load_image
from movie_identifier.security import FileValidator, FileValidationError

from conftest import make_image_bytes


class TestValidateImageBytes:

    @pytest.mark.parametrize("fmt,mime_type", [
        ("JPEG", "image/jpeg"),
        ("PNG", "image/png"),
        ("WEBP", "image/webp"),
    ])
    def test_allowed_formats(self, fmt, mime_type):
        """Test JPEG, PNG and WebP are accepted"""
        is_valid, error = FileValidator.validate_image_bytes(make_image_bytes(fmt), mime_type)
        assert is_valid
        assert error is None

    def test_disallowed_mime_type(self):
        """Test unsupported MIME types are rejected"""
        is_valid, error = FileValidator.validate_image_bytes(make_image_bytes("GIF"), "image/gif")
        assert not is_valid
        assert "not allowed" in error

    def test_empty_file(self):
        """Test empty payloads are rejected"""
        is_valid, error = FileValidator.validate_image_bytes(b"", "image/png")
        assert not is_valid
        assert error == "File is empty"

    def test_too_large(self):
        """Test payloads over the size limit are rejected"""
        data = make_image_bytes("PNG")
        is_valid, error = FileValidator.validate_image_bytes(data, "image/png", max_size=10)
        assert not is_valid
        assert "exceeds maximum" in error

    def test_not_an_image(self):
        """Test non-image bytes are rejected"""
        is_valid, error = FileValidator.validate_image_bytes(b"definitely not a png", "image/png")
        assert not is_valid
        assert "Image validation failed" in error

    def test_content_must_match_claimed_type(self):
        """Test the decoded format must match the claimed type"""
        is_valid, error = FileValidator.validate_image_bytes(make_image_bytes("JPEG"), "image/png")
        assert not is_valid
        assert "image/jpeg" in error

    def test_guess_mime_type(self):
        """Test MIME types are guessed from file extensions"""
        assert FileValidator.guess_mime_type("Scene.JPG") == "image/jpeg"
        assert FileValidator.guess_mime_type("scene.webp") == "image/webp"
        assert FileValidator.guess_mime_type("scene.gif") is None


class TestLoadImage:

    def test_load_valid_file(self, tmp_path):
        """Test a valid image file loads into an ImageUpload"""
        path = tmp_path / "scene.png"
        path.write_bytes(make_image_bytes("PNG"))

        image = load_image(str(path))

        assert image.filename == "scene.png"
        assert image.mime_type == "image/png"
        assert image.data == path.read_bytes()

    def test_missing_file(self, tmp_path):
        """Test a missing path is rejected"""
        with pytest.raises(FileValidationError, match="does not exist"):
            load_image(str(tmp_path / "missing.png"))

    def test_wrong_extension(self, tmp_path):
        """Test unsupported extensions are rejected"""
        path = tmp_path / "scene.bmp"
        path.write_bytes(make_image_bytes("BMP"))

        with pytest.raises(FileValidationError, match="not allowed"):
            load_image(str(path))

    def test_corrupt_file(self, tmp_path):
        """Test corrupt image files are rejected"""
        path = tmp_path / "scene.jpg"
        path.write_bytes(b"garbage")

        with pytest.raises(FileValidationError):
            load_image(str(path))


def test_encode_image_is_base64():
    """Test encoded images decode back to the original bytes"""
    assert encode_image(b"\x00\x01\x02") == "AAEC"
