"""Loan program comparison engine.

Amortization, mortgage insurance, DTI and buy-down break-even figures for a
set of loan programs, plus the versioned scenario payload used to save them.
"""

from loancomp.codec import DecodeErrorKind, DecodeResult, decode, decode_json, encode
from loancomp.comparison import evaluate
from loancomp.models import Debt, LoanData, Program, ProgramDebtSelection
from loancomp.workspace import LoanWorkspace

__all__ = [
    "__version__",
    "Debt",
    "DecodeErrorKind",
    "DecodeResult",
    "LoanData",
    "LoanWorkspace",
    "Program",
    "ProgramDebtSelection",
    "decode",
    "decode_json",
    "encode",
    "evaluate",
]

# Keep in sync with the version declared in ``pyproject.toml``
__version__ = "0.1.0"
