import pytest

from logtide.adapters import FILE_WRITER, LAMBDA_BACKEND, STDOUT, LambdaAdapter


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Isolate tests from the host environment and from each other."""
    for var in ("LOGTIDE_MODE", "LOGTIDE_LEVEL", "LOGTIDE_FILE", "AWS_LAMBDA_FUNCTION_NAME"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setattr(LambdaAdapter, "_missing_backend_reported", False)
    yield
    for channel in (STDOUT, FILE_WRITER, LAMBDA_BACKEND):
        channel.restore()


@pytest.fixture
def stdout_lines():
    """Capture everything written to the shared stdout channel."""
    lines: list[str] = []
    STDOUT.replace(lines.append)
    return lines
