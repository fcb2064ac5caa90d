import pytest

from sentinel.core.config import Settings


@pytest.mark.parametrize(
    "raw",
    [
        "http://localhost:3000, https://ops.healthcare.org",
        '["http://localhost:3000", "https://ops.healthcare.org"]',
    ],
)
def test_cors_origins_from_env(monkeypatch, raw) -> None:
    monkeypatch.setenv("BACKEND_CORS_ORIGINS", raw)

    assert Settings().BACKEND_CORS_ORIGINS == [
        "http://localhost:3000",
        "https://ops.healthcare.org",
    ]


def test_cors_origins_default_to_empty(monkeypatch) -> None:
    monkeypatch.delenv("BACKEND_CORS_ORIGINS", raising=False)

    assert Settings().BACKEND_CORS_ORIGINS == []


def test_empty_cors_origins_env(monkeypatch) -> None:
    monkeypatch.setenv("BACKEND_CORS_ORIGINS", "")

    assert Settings().BACKEND_CORS_ORIGINS == []
