"""
Tests for pyproject.toml — distribution metadata.

Validates:
    - runtime dependencies are declared
    - YAML theory templates ship as package data
    - internal design notes are not published as the package description
"""

import tomllib
from pathlib import Path

import pytest

PYPROJECT = Path(__file__).resolve().parent.parent / "pyproject.toml"


@pytest.fixture(scope="module")
def project_metadata() -> dict:
    with PYPROJECT.open("rb") as f:
        return tomllib.load(f)


class TestProjectMetadata:
    def test_runtime_dependencies(self, project_metadata):
        deps = " ".join(project_metadata["project"]["dependencies"])
        assert "pydantic" in deps
        assert "pyyaml" in deps

    def test_templates_are_package_data(self, project_metadata):
        package_data = project_metadata["tool"]["setuptools"]["package-data"]
        assert package_data["engine.music_theory"] == ["templates/*.yaml"]

    def test_design_notes_not_used_as_readme(self, project_metadata):
        assert project_metadata["project"].get("readme") != "DESIGN.md"
