"""
D2 Compiler
===========

Thin async wrapper around the ``d2`` command-line compiler.

Icon URLs are rewritten to local files before the source reaches the
compiler so rendering never needs network access. Resolution
diagnostics are reported through this module's logger.
"""

from pathlib import Path
from typing import Any, List, Optional, Tuple
import asyncio
import tempfile
import time

from d2_icon_resolver.config.logging import get_logger
from d2_icon_resolver.config.settings import Settings, get_settings
from d2_icon_resolver.core.icons.rewriter import IconRewriter
from d2_icon_resolver.models.schemas import (
    CompileOptions,
    CompileResult,
    ResolutionDiagnostics,
    RewriteResult,
    ValidationResult,
)

logger = get_logger(__name__)

SOURCE_FILENAME = "input.d2"
OUTPUT_FILENAME = "output.svg"


class D2CompileError(Exception):
    """Exception raised when the d2 compiler fails."""

    pass


def build_cli_flags(options: CompileOptions) -> List[str]:
    """
    Translate compile options into d2 command-line flags.

    Args:
        options: Compile options

    Returns:
        List of flags; unset options are omitted
    """
    flags: List[str] = []
    if options.layout is not None:
        flags.append(f"--layout={options.layout}")
    if options.sketch is not None:
        flags.append(f"--sketch={str(options.sketch).lower()}")
    if options.theme_id is not None:
        flags.append(f"--theme={options.theme_id}")
    if options.dark_theme_id is not None:
        flags.append(f"--dark-theme={options.dark_theme_id}")
    if options.pad is not None:
        flags.append(f"--pad={options.pad}")
    if options.center is not None:
        flags.append(f"--center={str(options.center).lower()}")
    if options.scale is not None:
        flags.append(f"--scale={options.scale}")
    if options.target is not None:
        flags.append(f"--target={options.target}")
    if options.animate_interval is not None:
        flags.append(f"--animate-interval={options.animate_interval}")
    if options.no_xml_tag is not None:
        flags.append(f"--no-xml-tag={str(options.no_xml_tag).lower()}")
    return flags


class D2Compiler:
    """Compiles d2 source through the d2 CLI after resolving icon URLs."""

    def __init__(self, rewriter: Optional[IconRewriter] = None, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.rewriter = rewriter or IconRewriter()
        self.logger: Any = logger.bind(component="d2_compiler")  # structlog.BoundLoggerBase

    def prepare_source(self, code: str) -> RewriteResult:
        """Rewrite icon URLs in ``code`` and log the outcome."""
        result = self.rewriter.rewrite(code)
        self.log_diagnostics(result.diagnostics)
        return result

    def log_diagnostics(self, diagnostics: ResolutionDiagnostics) -> None:
        if not diagnostics.has_activity:
            return
        if diagnostics.unresolved_urls:
            self.logger.warning(
                "Some icon URLs could not be resolved",
                resolved=diagnostics.resolved_count,
                unresolved=len(diagnostics.unresolved_urls),
                urls=diagnostics.unresolved_urls,
            )
        else:
            self.logger.info("Resolved icon URLs to local files", resolved=diagnostics.resolved_count)

    async def _terminate(self, process: Any) -> None:
        """Kill a running d2 process and reap it."""
        try:
            process.kill()
        except ProcessLookupError:
            pass
        await process.wait()

    async def _run(self, *args: str) -> Tuple[int, str, str]:
        """Run the d2 binary and return (exit code, stdout, stderr)."""
        try:
            process = await asyncio.create_subprocess_exec(
                self.settings.d2_binary,
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError:
            raise D2CompileError(f"d2 executable not found: {self.settings.d2_binary}")

        try:
            stdout, stderr = await asyncio.wait_for(
                process.communicate(), timeout=self.settings.d2_timeout
            )
        except asyncio.TimeoutError:
            await self._terminate(process)
            raise D2CompileError(f"d2 timed out after {self.settings.d2_timeout}s")
        except asyncio.CancelledError:
            await self._terminate(process)
            raise

        return (
            process.returncode if process.returncode is not None else -1,
            stdout.decode("utf-8", errors="replace"),
            stderr.decode("utf-8", errors="replace"),
        )

    async def compile(self, code: str, options: Optional[CompileOptions] = None) -> CompileResult:
        """
        Compile d2 source into SVG.

        Args:
            code: d2 source code
            options: Optional compile options

        Returns:
            CompileResult with the SVG and icon diagnostics

        Raises:
            D2CompileError: If the compiler is missing, times out or rejects the source
        """
        start_time = time.time()
        options = options or CompileOptions()
        prepared = self.prepare_source(code)

        with tempfile.TemporaryDirectory(prefix="d2_compile_") as workdir:
            source = Path(workdir) / SOURCE_FILENAME
            output = Path(workdir) / OUTPUT_FILENAME
            source.write_text(prepared.text, encoding="utf-8")

            self.logger.info("Compiling d2 source", source_length=len(prepared.text))
            returncode, _stdout, stderr = await self._run(
                *build_cli_flags(options), str(source), str(output)
            )

            if returncode != 0:
                message = stderr.strip() or f"d2 exited with status {returncode}"
                self.logger.error("d2 compilation failed", error=message)
                raise D2CompileError(message)

            if not output.exists():
                raise D2CompileError("d2 produced no output")
            svg = output.read_text(encoding="utf-8")

        processing_time = time.time() - start_time
        self.logger.info(
            "d2 compilation succeeded", svg_length=len(svg), processing_time=processing_time
        )
        return CompileResult(
            svg=svg, diagnostics=prepared.diagnostics, processing_time=processing_time
        )

    async def validate(self, code: str) -> ValidationResult:
        """
        Validate d2 source without rendering.

        Args:
            code: d2 source code

        Returns:
            ValidationResult; compiler failures are reported, never raised
        """
        prepared = self.prepare_source(code)

        with tempfile.TemporaryDirectory(prefix="d2_validate_") as workdir:
            source = Path(workdir) / SOURCE_FILENAME
            source.write_text(prepared.text, encoding="utf-8")
            try:
                returncode, _stdout, stderr = await self._run("validate", str(source))
            except D2CompileError as e:
                return ValidationResult(valid=False, errors=[str(e)])

        if returncode == 0:
            return ValidationResult(valid=True, errors=[])

        errors = [line.strip() for line in stderr.splitlines() if line.strip()]
        return ValidationResult(valid=False, errors=errors or [f"d2 exited with status {returncode}"])

    async def version(self) -> str:
        """Return the d2 version string."""
        returncode, stdout, stderr = await self._run("--version")
        if returncode != 0:
            raise D2CompileError(stderr.strip() or "d2 --version failed")
        return stdout.strip()


async def compile_d2(code: str, options: Optional[CompileOptions] = None) -> CompileResult:
    """Compile d2 source with a default compiler instance."""
    return await D2Compiler().compile(code, options)


async def validate_d2(code: str) -> ValidationResult:
    """Validate d2 source with a default compiler instance."""
    return await D2Compiler().validate(code)
