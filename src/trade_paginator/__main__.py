"""Allow ``python -m trade_paginator``."""

from .main import run

run()
