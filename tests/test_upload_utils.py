import io

import pytest
from starlette.datastructures import Headers, UploadFile

from core.exceptions import FileUploadException, PayloadTooLargeException
from utils.upload_utils import describe_error, get_upload_size, validate_image_files


def make_upload(filename="a.jpg", data=b"x" * 10, content_type="image/jpeg", size=-1):
    return UploadFile(
        file=io.BytesIO(data),
        filename=filename,
        size=len(data) if size == -1 else size,
        headers=Headers({"content-type": content_type}) if content_type else Headers({})
    )


class TestValidateImageFiles:

    @pytest.mark.parametrize("files", [None, [], [None]])
    def test_no_files(self, files):
        with pytest.raises(FileUploadException) as exc_info:
            validate_image_files(files, max_files=10, max_file_size=100)

        assert exc_info.value.message == "No files uploaded"
        assert exc_info.value.status_code == 400

    def test_too_many_files(self):
        files = [make_upload(f"{i}.jpg") for i in range(11)]

        with pytest.raises(FileUploadException) as exc_info:
            validate_image_files(files, max_files=10, max_file_size=100)

        assert exc_info.value.details["count"] == 11

    @pytest.mark.parametrize("content_type", ["application/pdf", "text/plain", None])
    def test_any_non_image_rejects_the_whole_request(self, content_type):
        files = [make_upload("a.jpg"), make_upload("doc.pdf", content_type=content_type)]

        with pytest.raises(FileUploadException) as exc_info:
            validate_image_files(files, max_files=10, max_file_size=100)

        assert exc_info.value.message == "Only image files are allowed"
        assert exc_info.value.details["filename"] == "doc.pdf"

    def test_oversized_file(self):
        files = [make_upload("big.jpg", data=b"x" * 101)]

        with pytest.raises(PayloadTooLargeException) as exc_info:
            validate_image_files(files, max_files=10, max_file_size=100)

        assert exc_info.value.status_code == 413

    def test_file_at_the_cap_is_accepted(self):
        files = [make_upload("edge.png", data=b"x" * 100, content_type="image/png")]

        assert validate_image_files(files, max_files=10, max_file_size=100) == files


def test_size_is_measured_when_unknown():
    upload = make_upload(data=b"12345", size=None)
    upload.file.seek(2)

    assert get_upload_size(upload) == 5
    assert upload.file.tell() == 2


@pytest.mark.parametrize("error,expected", [
    (Exception({"statusCode": 403, "message": "Forbidden bucket"}), "Forbidden bucket"),
    (Exception({"statusCode": 500, "error": "Internal"}), "Internal"),
    (ValueError("plain message"), "plain message"),
    (TimeoutError(), "TimeoutError"),
])
def test_describe_error(error, expected):
    assert describe_error(error) == expected
