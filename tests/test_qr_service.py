import base64

from snaplink.services.qr_service import DATA_URL_PREFIX, generate_qr_data_url, generate_qr_png

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


def test_png_output():
    assert generate_qr_png("http://sl.test/s/Xy12aB34Cd").startswith(PNG_SIGNATURE)


def test_data_url():
    data_url = generate_qr_data_url("http://sl.test/s/Xy12aB34Cd")

    assert data_url.startswith(DATA_URL_PREFIX)
    assert base64.b64decode(data_url[len(DATA_URL_PREFIX):]).startswith(PNG_SIGNATURE)
