"""Synthesis subpackage for splat."""

from splat.synthesis.arguments import render_call, synthesize_arguments, synthesize_call
from splat.synthesis.collect import PropertyCollector, check_unique_names, collect_properties
from splat.synthesis.configuration import locate_bundle, resolve_configuration
from splat.synthesis.docs import build_docstring, parse_docstring
from splat.synthesis.effects import propagate_effect, qualify_error
from splat.synthesis.emit import emit_constructor, render_constructor
from splat.synthesis.expander import Expander, expand_declaration
from splat.synthesis.model import (
    AnnotationArgument,
    BundleCall,
    ClassDecl,
    Constructor,
    Effect,
    EffectKind,
    ExpansionResult,
    ExpansionSettings,
    Field,
    GeneratedConstructor,
    Method,
    Parameter,
    PathSegment,
    PropertyRecord,
    SplatConfig,
)

__all__ = [
    "AnnotationArgument",
    "BundleCall",
    "ClassDecl",
    "Constructor",
    "Effect",
    "EffectKind",
    "Expander",
    "ExpansionResult",
    "ExpansionSettings",
    "Field",
    "GeneratedConstructor",
    "Method",
    "Parameter",
    "PathSegment",
    "PropertyCollector",
    "PropertyRecord",
    "SplatConfig",
    "build_docstring",
    "check_unique_names",
    "collect_properties",
    "emit_constructor",
    "expand_declaration",
    "locate_bundle",
    "parse_docstring",
    "propagate_effect",
    "qualify_error",
    "render_call",
    "render_constructor",
    "resolve_configuration",
    "synthesize_arguments",
    "synthesize_call",
]
