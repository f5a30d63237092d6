"""Video URL parsing."""

import pytest

from load_timer.media_source import extract_video_id, is_probably_url


class TestExtractVideoId:
    @pytest.mark.parametrize("url,expected", [
        ("https://www.youtube.com/watch?v=dQw4w9WgXcQ", "dQw4w9WgXcQ"),
        ("https://www.youtube.com/watch?feature=share&v=abc&t=10", "abc"),
        ("https://youtu.be/xyz789", "xyz789"),
        ("https://youtu.be/xyz789?t=42", "xyz789"),
        ("https://www.youtube.com/embed/EMB3D", "EMB3D"),
    ])
    def test_valid(self, url, expected):
        assert extract_video_id(url) == expected

    @pytest.mark.parametrize("url", [
        "",
        "not a url",
        "ftp://youtube.com/watch?v=abc",
        "https://www.youtube.com/",
        "https://youtu.be/",
        "https://example.com/video.mp4",
        None,
    ])
    def test_invalid_returns_none(self, url):
        assert extract_video_id(url) is None


class TestIsProbablyUrl:
    def test_http(self):
        assert is_probably_url("http://example.com/a")

    def test_missing_host(self):
        assert not is_probably_url("https://")
