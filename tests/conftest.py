import pytest


@pytest.fixture
def write_props(tmp_path):
    """Write a UTF-8 properties file into tmp_path and return its path."""

    def _write(name, text):
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write
