"""Docket - branching courtroom narrative engine"""

__version__ = "0.1.0"
