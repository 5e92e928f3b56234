import pytest


@pytest.fixture(autouse=True)
def isolated_render_log(tmp_path, monkeypatch):
    """Keep every test's render log out of the working directory."""
    log_path = tmp_path / "render.log"
    monkeypatch.setenv("BRACEVIEW_LOG", str(log_path))
    monkeypatch.delenv("BRACEVIEW_VIEW", raising=False)
    return log_path
