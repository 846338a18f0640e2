# Author: Bradley R. Kinnard — every await adds its wait to the bill

"""Waterfall rule. 3rd sequential await in a function with no gather/wait anywhere."""

from src.backend.analyzer.diagnostics import Diagnostic
from src.backend.core.models import Severity
from src.backend.rules.base_rule import BaseRule


class WaterfallRule(BaseRule):

    description = (
        "Flags async handlers and services with three or more sequential awaits "
        "and no asyncio.gather()/asyncio.wait() anywhere in the function."
    )

    def __init__(self):
        # confidence stays modest, the count alone says nothing about real dependencies
        super().__init__("waterfall-chain", Severity.WARNING, 0.6, "wfc")

    def message(self, diagnostic: Diagnostic) -> str:
        return (
            f"Waterfall chain: the await on line {diagnostic.line} is the 3rd sequential await in this function. "
            "Each await blocks the next, so the wait times add up. "
            "Fix: start independent work together, "
            "`a, b, c = await asyncio.gather(fetch_a(), fetch_b(), fetch_c())`, "
            "or create tasks first and await them afterwards. "
            "If every await needs the previous result, the order is intentional and this does not apply."
        )
