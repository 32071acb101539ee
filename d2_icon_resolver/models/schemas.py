"""
Pydantic Models and Schemas
===========================

Data models for icon rewrite results, resolution diagnostics and the
d2 compiler integration.
"""

from typing import Optional, List, Literal

from pydantic import BaseModel, ConfigDict, Field


class ResolutionDiagnostics(BaseModel):
    """Outcome of rewriting every icon URL in a piece of source text."""

    model_config = ConfigDict(populate_by_name=True)

    resolved_count: int = Field(
        0, ge=0, alias="resolvedCount", description="Number of URL occurrences rewritten"
    )
    unresolved_urls: List[str] = Field(
        default_factory=list,
        alias="unresolvedURLs",
        description="URL occurrences left untouched, in source order",
    )

    @property
    def has_activity(self) -> bool:
        """True when at least one icon URL was seen."""
        return self.resolved_count > 0 or bool(self.unresolved_urls)


class RewriteResult(BaseModel):
    """Rewritten source text together with its diagnostics."""

    text: str = Field(..., description="Source text with resolved URLs replaced")
    diagnostics: ResolutionDiagnostics = Field(default_factory=ResolutionDiagnostics)


class CompileOptions(BaseModel):
    """Options forwarded to the d2 compiler."""

    model_config = ConfigDict(populate_by_name=True)

    layout: Optional[Literal["dagre", "elk"]] = Field(None, description="Layout engine")
    sketch: Optional[bool] = Field(None, description="Hand-drawn sketch mode")
    theme_id: Optional[int] = Field(None, alias="themeID", description="Theme ID")
    dark_theme_id: Optional[int] = Field(
        None, alias="darkThemeID", description="Theme ID for dark mode rendering"
    )
    pad: Optional[int] = Field(None, ge=0, description="Padding around the diagram in pixels")
    center: Optional[bool] = Field(None, description="Center the SVG in its viewbox")
    scale: Optional[float] = Field(None, gt=0, description="Output scale factor")
    target: Optional[str] = Field(None, description="Target board for multi-board diagrams")
    animate_interval: Optional[int] = Field(
        None, ge=0, alias="animateInterval", description="Animation interval in ms"
    )
    no_xml_tag: Optional[bool] = Field(
        None, alias="noXMLTag", description="Omit the XML declaration from the SVG"
    )


class CompileResult(BaseModel):
    """Rendered SVG plus the icon diagnostics of its source."""

    svg: str = Field(..., description="Rendered SVG markup")
    diagnostics: ResolutionDiagnostics = Field(default_factory=ResolutionDiagnostics)
    processing_time: float = Field(0.0, ge=0, description="Compile time in seconds")


class ValidationResult(BaseModel):
    """Result of validating d2 source without rendering."""

    valid: bool = Field(..., description="Whether the source compiled")
    errors: List[str] = Field(default_factory=list, description="Compiler error messages")
