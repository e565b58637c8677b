"""Shared test fixtures."""

import pytest


@pytest.fixture
def site_root(tmp_path):
    """Temporary repository root for reconciliation writes."""
    d = tmp_path / "site"
    d.mkdir()
    return d


@pytest.fixture
def write_manifest(site_root):
    """Return a helper that writes manifest rows to ``site_root/pages.csv``."""
    def _write(rows, header="directory,name"):
        path = site_root / "pages.csv"
        lines = [header] + [f"{d},{n}" for d, n in rows]
        path.write_text("\n".join(lines) + "\n", "utf-8")
        return path
    return _write
