# ──────────────────────────────────────────────────────────────────────
# Nodebook Core — Package Init
# © 1998–2026 Miroslav Šotek. All rights reserved.
# Contact: www.anulum.li | protoscience@anulum.li
# ORCID: https://orcid.org/0009-0009-3560-0851
# License: GNU AGPL v3 | Commercial licensing available
# ──────────────────────────────────────────────────────────────────────
"""
Nodebook Core
=============

CNL compiler, Petri-net token engine and flat transaction ledger.
"""

__version__ = "0.4.0"

from .compile import CompileResult, compile_text, detect_graph_mode
from .cnl.model import GraphData
from .petri.engine import PetriEngine
from .ledger.parser import parse_ledger
from .ledger.compute import compute_ledger

__all__ = [
    "__version__",
    "CompileResult",
    "compile_text",
    "detect_graph_mode",
    "GraphData",
    "PetriEngine",
    "parse_ledger",
    "compute_ledger",
]
