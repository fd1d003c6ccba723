# Copyright (C) 2025 Gil Benezer
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published
# by the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.

"""
Unit tests for the project metadata.

Tests cover:
1. pyproject.toml readme and version
2. README contents
"""

from pathlib import Path

import pytest

import ipsim
from ipsim.models import MODELS

PROJECT_ROOT = Path(__file__).resolve().parents[3]


@pytest.fixture(scope="module")
def pyproject():
    return (PROJECT_ROOT / "pyproject.toml").read_text(encoding="utf-8")


# ============================================================================
# Test Class 1: pyproject.toml
# ============================================================================


class TestPyproject:
    """Test the declared package metadata"""

    def test_readme_is_package_readme(self, pyproject):
        assert 'readme = "README.md"' in pyproject
        assert (PROJECT_ROOT / "README.md").is_file()

    def test_version_matches_package(self, pyproject):
        assert f'version = "{ipsim.__version__}"' in pyproject


# ============================================================================
# Test Class 2: README
# ============================================================================


class TestReadme:
    """Test the README describes the package"""

    @pytest.fixture(scope="class")
    def readme(self):
        return (PROJECT_ROOT / "README.md").read_text(encoding="utf-8")

    def test_names_package(self, readme):
        assert readme.startswith("# ipsim")
        assert "pip install -e" in readme

    def test_lists_every_model(self, readme):
        for key, model in MODELS.items():
            assert f"`{key}`" in readme
            assert model.label in readme
