import pytest

from calcvault.shared.errors import DecodeFailure
from calcvault.vault.encoding import to_data_url, parse_data_url, estimated_size


def test_data_url_carries_mime_and_body():
    url = to_data_url(b"hello", "text/plain")
    assert url == "data:text/plain;base64,aGVsbG8="
    assert parse_data_url(url) == ("text/plain", b"hello")


def test_missing_mime_falls_back_to_octet_stream():
    assert to_data_url(b"", "").startswith("data:application/octet-stream;base64,")


def test_percent_encoded_payload():
    assert parse_data_url("data:text/plain,a%20b") == ("text/plain", b"a b")


@pytest.mark.parametrize("bad", ["hello", "data:text/plain;base64", "data:image/png;base64,@@@"])
def test_bad_payloads(bad):
    with pytest.raises(DecodeFailure):
        parse_data_url(bad)


def test_estimated_size_rounds_half_up():
    assert estimated_size("abcd") == 3
    assert estimated_size("ab") == 2   # 1.5 -> 2
    assert estimated_size("a") == 1    # 0.75 -> 1
