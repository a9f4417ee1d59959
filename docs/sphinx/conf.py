# Copyright 2026 SADL Contributors
# SPDX-License-Identifier: Apache-2.0

"""Sphinx configuration for the SADL documentation."""

project = "SADL"
author = "SADL Contributors"
release = "0.1.0"

extensions: list[str] = ["sphinx.ext.autodoc", "sphinx.ext.napoleon"]
autodoc_mock_imports = ["dash", "plotly"]

html_theme = "alabaster"
html_title = "SADL - System Architecture Description Language"
