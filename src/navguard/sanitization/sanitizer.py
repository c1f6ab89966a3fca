"""
Navigation sanitizer.

Orchestrates parse -> classify/remove -> generate -> normalize, and applies
the fail-safe policy when the input cannot be parsed. ``sanitize`` never
raises: every input produces a string.

Flow:
    source text -> TreeSitterJavaScriptProvider -> SyntaxTree
    -> StatementRemover (mutates tree) -> CodeGenerator -> normalize_output
"""

from __future__ import annotations

import time
from typing import List, Optional

import structlog

from navguard.ast.domain.models import ParseError
from navguard.ast.generator import CodeGenerator
from navguard.ast.providers.tree_sitter_provider import TreeSitterJavaScriptProvider
from navguard.sanitization.classifier import AssignmentTargetClassifier
from navguard.sanitization.domain.enums import FailSafePolicy, SanitizeOutcome
from navguard.sanitization.domain.models import Hazard, NavigationRules, SanitizeReport
from navguard.sanitization.normalizer import normalize_output
from navguard.sanitization.remover import StatementRemover
from navguard.shared.infrastructure.config import settings

logger = structlog.get_logger(__name__)


class NavigationSanitizer:
    """
    Strip navigation-redirect assignments from untrusted JavaScript.

    The sanitizer holds configuration only; each call parses into its own
    tree, so one instance is safe to share between threads.

    Fail-safe:
        With FailSafePolicy.EMPTY (default) unparseable input yields "".
        FailSafePolicy.PASSTHROUGH returns the input unchanged instead, for
        callers that treat a rejected result as "not yet sanitized". Either
        way the report outcome is REJECTED.

    Example:
        ```python
        sanitizer = NavigationSanitizer()
        report = sanitizer.sanitize('go(); window.location.href = "https://evil.example";')
        assert report.code == "go();"
        ```
    """

    def __init__(
        self,
        rules: Optional[NavigationRules] = None,
        fail_safe: Optional[FailSafePolicy] = None,
        provider: Optional[TreeSitterJavaScriptProvider] = None,
        generator: Optional[CodeGenerator] = None,
    ) -> None:
        self.rules = rules or NavigationRules.from_settings(settings)
        self.fail_safe = FailSafePolicy(fail_safe or settings.fail_safe_policy)
        self.provider = provider or TreeSitterJavaScriptProvider()
        self.generator = generator or CodeGenerator()
        self.remover = StatementRemover(AssignmentTargetClassifier(self.rules), self.generator)

    def sanitize(self, source_code: str) -> SanitizeReport:
        """
        Sanitize one piece of JavaScript.

        Args:
            source_code: Untrusted JavaScript source text

        Returns:
            SanitizeReport whose ``code`` is the text to hand to the caller
        """
        start_time = time.time()

        try:
            report = self._sanitize(source_code)
        except Exception as e:
            logger.error(
                "sanitize_failed",
                error=str(e),
                error_type=type(e).__name__,
                code_length=len(source_code),
            )
            report = self._reject(
                source_code, [ParseError(message=f"Internal sanitizer error: {type(e).__name__}")]
            )

        report.duration_ms = (time.time() - start_time) * 1000
        logger.info(
            "sanitize_completed",
            outcome=report.outcome.value,
            removed_count=report.removed_count,
            code_length=len(source_code),
            duration_ms=round(report.duration_ms, 3),
        )
        return report

    def scan(self, source_code: str) -> tuple[List[Hazard], List[ParseError]]:
        """
        List navigation writes without removing them.

        Returns:
            (hazards, parse errors); hazards is empty when parsing failed
        """
        result = self.provider.parse(source_code)
        if not result.is_success():
            return [], result.errors
        return self.remover.find_hazards(result.tree), []

    def _sanitize(self, source_code: str) -> SanitizeReport:
        result = self.provider.parse(source_code)
        if not result.is_success():
            return self._reject(source_code, result.errors)

        removed_count = self.remover.remove(result.tree)
        if removed_count == 0:
            return SanitizeReport(code=source_code, outcome=SanitizeOutcome.UNCHANGED)

        generated = self.generator.generate(result.tree)
        return SanitizeReport(
            code=normalize_output(source_code, generated, removed_count),
            outcome=SanitizeOutcome.SANITIZED,
            removed_count=removed_count,
        )

    def _reject(self, source_code: str, errors: List[ParseError]) -> SanitizeReport:
        code = source_code if self.fail_safe == FailSafePolicy.PASSTHROUGH else ""
        logger.warning(
            "sanitize_rejected",
            fail_safe=self.fail_safe.value,
            errors=[error.message for error in errors],
        )
        return SanitizeReport(code=code, outcome=SanitizeOutcome.REJECTED, errors=errors)


def sanitize_code(source_code: str) -> str:
    """
    Sanitize JavaScript with the process-wide settings.

    Returns:
        Sanitized code; "" means the input was rejected under the default
        fail-safe policy, not that it was empty and safe.
    """
    return NavigationSanitizer().sanitize(source_code).code
